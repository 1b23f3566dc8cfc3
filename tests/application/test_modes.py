from __future__ import annotations

import io
import json

from lib_config_pipeline.application.introspect import introspect
from lib_config_pipeline.application.modes import apply_modes, enabled_modes
from lib_config_pipeline.domain.store import PropertyStore


def test_runtime_mode_applied_last_wins() -> None:
    store = PropertyStore({"enable": ["dev"], "x": 1, "mods": {"dev": {"x": 2}, "docker": {"x": 3}}})
    assert apply_modes(store, "docker") == ["dev", "docker"]
    assert store.get("x") == 3
    assert store.origin("x")["layer"] == "mods.docker"


def test_later_enabled_modes_take_precedence() -> None:
    store = PropertyStore(
        {
            "enable": ["base", "prod"],
            "mods": {"base": {"db": {"host": "base", "pool": 5}}, "prod": {"db": {"host": "prod"}}},
        }
    )
    apply_modes(store, "linux")
    assert store.get("db") == {"host": "prod", "pool": 5}


def test_enable_not_a_list_is_a_noop() -> None:
    store = PropertyStore({"enable": "dev", "x": 1, "mods": {"dev": {"x": 2}, "linux": {"x": 3}}})
    assert apply_modes(store, "linux") == []
    assert store.get("x") == 1


def test_missing_enable_is_a_noop() -> None:
    store = PropertyStore({"x": 1, "mods": {"linux": {"x": 3}}})
    assert apply_modes(store, "linux") == []
    assert store.get("x") == 1


def test_empty_enable_still_applies_runtime_mode() -> None:
    store = PropertyStore({"enable": [], "mods": {"linux": {"x": 3}}})
    assert apply_modes(store, "linux") == ["linux"]
    assert store.get("x") == 3


def test_dynamic_list_elements_are_stringified() -> None:
    store = PropertyStore(
        {
            "enable": [2024, True, 1.0, False],
            "mods": {"2024": {"year": "yes"}, "true": {"flag": "set"}, "1": {"one": 1}, "false": {"off": True}},
        }
    )
    assert enabled_modes(store, None) == ["2024", "true", "1", "false"]
    assert apply_modes(store, None) == ["2024", "true", "1", "false"]
    assert store.get("year") == "yes"
    assert store.get("flag") == "set"
    assert store.get("one") == 1
    assert store.get("off") is True


def test_dotted_mode_walks_nested_subtree() -> None:
    store = PropertyStore({"enable": ["prod.eu"], "mods": {"prod": {"eu": {"x": 1}, "us": {"x": 2}}}})
    assert apply_modes(store, None) == ["prod.eu"]
    assert store.get("x") == 1
    assert store.origin("x")["layer"] == "mods.prod.eu"


def test_unknown_modes_are_skipped() -> None:
    store = PropertyStore({"enable": ["ghost"], "mods": {"dev": {"x": 2}, "ghost": "not-a-mapping"}})
    assert apply_modes(store, "windows") == []


def test_introspect_dumps_only_when_flag_present() -> None:
    quiet = PropertyStore({"x": 1})
    stream = io.StringIO()
    assert introspect(quiet, stream) is False
    assert stream.getvalue() == ""

    loud = PropertyStore({"x": 1, "keys": {"help": "", "configdata": b"{}"}})
    before = loud.as_dict()
    assert introspect(loud, stream) is True
    assert json.loads(stream.getvalue()) == {"x": 1, "keys": {"help": "", "configdata": "{}"}}
    assert loud.as_dict() == before

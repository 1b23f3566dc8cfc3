from __future__ import annotations

import sys

from lib_config_pipeline.adapters.args.default import apply_args, parse_arg
from lib_config_pipeline.domain.store import PropertyStore


def test_parse_arg_variants() -> None:
    assert parse_arg("--a.b=c") == ("a.b", "c")
    assert parse_arg("--flag") == ("flag", "")
    assert parse_arg("--empty=") == ("empty", "")
    assert parse_arg("--=value") is None
    assert parse_arg("-x=1") is None
    assert parse_arg("positional") is None


def test_apply_args_sets_strings_in_order() -> None:
    store = PropertyStore({"server": {"port": 80}}, layer="file")
    applied = apply_args(store, ["serve", "--server.port=9000", "--server.port=9001", "--debug"])
    assert applied == ["server.port", "server.port", "debug"]
    assert store.get("server.port") == "9001"
    assert store.get("debug") == ""
    assert store.origin("server.port")["layer"] == "args"


def test_apply_args_defaults_to_process_arguments(monkeypatch) -> None:
    monkeypatch.setattr(sys, "argv", ["prog", "--mode=fast"])
    store = PropertyStore()
    apply_args(store)
    assert store.get("mode") == "fast"


def test_arguments_replace_scalar_parents() -> None:
    store = PropertyStore({"db": "sqlite"})
    apply_args(store, ["--db.host=pg"])
    assert store.get("db") == {"host": "pg"}

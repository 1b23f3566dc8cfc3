from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from lib_config_pipeline.application.merge import merge_into
from lib_config_pipeline.domain.store import PropertyStore

KEY = st.text(alphabet="abcdefgh", min_size=1, max_size=4)
SCALAR = st.one_of(st.booleans(), st.integers(), st.text(min_size=1, max_size=5))
VALUE = st.recursive(
    SCALAR,
    lambda children: st.one_of(
        st.dictionaries(KEY, children, max_size=3),
        st.lists(children, max_size=3),
    ),
    max_leaves=10,
)
MAPPING = st.dictionaries(KEY, VALUE, max_size=4)


def _merged(*documents: dict) -> dict:
    store = PropertyStore()
    for index, document in enumerate(documents):
        merge_into(store, document, layer=f"layer{index}")
    return store.as_dict()


def test_nested_merge_retains_previous_keys() -> None:
    store = PropertyStore({"db": {"host": "localhost", "port": 5432}})
    merge_into(store, {"db": {"password": "secret"}}, layer="mods.dev")
    assert store.get("db") == {"host": "localhost", "port": 5432, "password": "secret"}
    assert store.origin("db.host")["layer"] == "defaults"
    assert store.origin("db.password")["layer"] == "mods.dev"


def test_lists_and_scalars_replace() -> None:
    store = PropertyStore({"hosts": ["a", "b"], "level": {"nested": 1}})
    merge_into(store, {"hosts": ["c"], "level": "debug"}, layer="file", path="app.json")
    assert store.get("hosts") == ["c"]
    assert store.get("level") == "debug"
    assert store.origin("level") == {"layer": "file", "path": "app.json", "key": "level"}
    assert store.origin("level.nested") is None


def test_mapping_replaces_scalar() -> None:
    store = PropertyStore({"db": "sqlite"})
    merge_into(store, {"db": {"host": "h"}}, layer="file")
    assert store.get("db") == {"host": "h"}


def test_empty_mapping_keeps_existing_branch() -> None:
    store = PropertyStore({"db": {"host": "h"}})
    merge_into(store, {"db": {}, "extra": {}}, layer="file")
    assert store.get("db") == {"host": "h"}
    assert store.get("extra") == {}


def test_merge_from_own_subtree_is_safe() -> None:
    store = PropertyStore({"mods": {"dev": {"mods": {"dev": {"x": 9}}, "x": 2}}})
    merge_into(store, store.get("mods.dev"), layer="mods.dev")
    assert store.get("x") == 2
    assert store.get("mods.dev.x") == 9


def test_merge_under_prefix() -> None:
    store = PropertyStore({"server": {"port": 1}})
    merge_into(store, {"port": 2, "host": "h"}, layer="file", prefix=["server"])
    assert store.get("server") == {"port": 2, "host": "h"}


def test_merge_does_not_alias_incoming() -> None:
    incoming = {"db": {"hosts": ["a"]}}
    store = PropertyStore()
    merge_into(store, incoming, layer="file")
    store.get("db.hosts").append("b")
    assert incoming["db"]["hosts"] == ["a"]


@given(MAPPING)
def test_merge_is_idempotent(document) -> None:
    assert _merged(document) == _merged(document, document)


def _assert_contains(actual, expected) -> None:
    if isinstance(expected, dict) and expected:
        assert isinstance(actual, dict)
        for sub_key, sub_val in expected.items():
            assert sub_key in actual
            _assert_contains(actual[sub_key], sub_val)
    elif not isinstance(expected, dict):
        assert actual == expected


@given(MAPPING, MAPPING)
def test_last_layer_wins(lhs, rhs) -> None:
    merged = _merged(lhs, rhs)
    for key, value in rhs.items():
        _assert_contains(merged[key], value)

"""Environment overlay tests covering the ``ENV_`` naming convention."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from lib_config_pipeline.adapters.env.default import DefaultEnvLoader, apply_env, env_key
from lib_config_pipeline.domain.store import PropertyStore


def test_env_key_mapping() -> None:
    assert env_key("ENV_SERVER_PORT") == "server.port"
    assert env_key("ENV_Db_Host") == "db.host"
    assert env_key("ENV_") is None
    assert env_key("env_server_port") is None
    assert env_key("APP_DEBUG", prefix="APP_") == "debug"


def test_env_overrides_file_value() -> None:
    store = PropertyStore({"server": {"port": 80, "host": "localhost"}}, layer="file")
    apply_env(store, {"ENV_SERVER_PORT": "8080", "HOME": "/root"})
    assert store.get("server.port") == "8080"
    assert store.get("server.host") == "localhost"
    assert store.origin("server.port")["layer"] == "env"
    assert "home" not in store


def test_custom_prefix_loader() -> None:
    store = PropertyStore()
    applied = DefaultEnvLoader(environ={"SVC_LOG_LEVEL": "debug", "ENV_X": "1"}, prefix="SVC_").apply(store)
    assert applied == ["log.level"]
    assert store.get("log.level") == "debug"
    assert store.get("x") is None


def test_reads_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("ENV_FEATURE_FLAG", "on")
    store = PropertyStore()
    apply_env(store)
    assert store.get_bool("feature.flag") is True


SEGMENTS = st.text(alphabet="abcdefghij", min_size=1, max_size=6)


@given(st.lists(SEGMENTS, min_size=1, max_size=4), st.text(max_size=10))
def test_values_stay_strings_at_mapped_key(segments, value) -> None:
    name = "ENV_" + "_".join(part.upper() for part in segments)
    store = PropertyStore()
    apply_env(store, {name: value})
    assert store.get(".".join(segments)) == value

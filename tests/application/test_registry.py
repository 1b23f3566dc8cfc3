from __future__ import annotations

import threading

import pytest

from lib_config_pipeline.application.registry import Registry, RegistryKind
from lib_config_pipeline.core import build_registry, default_registry


def test_empty_registry_has_no_entries() -> None:
    registry = Registry()
    for kind in RegistryKind:
        assert registry.names(kind) == []
    assert registry.reader("file") is None


def test_register_inserts_and_replaces() -> None:
    registry = Registry()
    registry.register(RegistryKind.CHECK, "yes", lambda arg: True)
    registry.register("check", "yes", lambda arg: False)
    assert registry.lookup(RegistryKind.CHECK, "yes")("x") is False
    assert registry.lookup("check", "missing") is None


def test_unknown_kind_rejected() -> None:
    with pytest.raises(ValueError):
        Registry().register("formatter", "x", lambda arg: arg)


def test_reader_falls_back_to_default() -> None:
    registry = Registry()

    def default_reader(descriptor: str) -> bytes:
        return b"default"

    def etcd_reader(descriptor: str) -> bytes:
        return b"etcd"

    registry.register(RegistryKind.READER, "default", default_reader)
    registry.register(RegistryKind.READER, "etcd", etcd_reader)
    assert registry.reader("etcd") is etcd_reader
    assert registry.reader("consul") is default_reader
    assert registry.reader(None) is default_reader


def test_builtin_entries() -> None:
    registry = build_registry()
    assert registry.names(RegistryKind.READER) == ["default", "file", "http", "https"]
    assert registry.names(RegistryKind.CHECK) == ["isnum"]
    assert registry.names(RegistryKind.CHECK_FACTORY) == ["min", "regexp"]
    assert registry.names(RegistryKind.DECODER) == [".json", ".toml", ".yaml", ".yml"]
    assert registry.reader("file") is registry.reader(None)
    assert registry.decoder(".YAML") is registry.decoder(".yml")


def test_new_check_returns_none_for_malformed_or_unknown() -> None:
    registry = build_registry()
    assert registry.new_check("min", "abc") is None
    assert registry.new_check("max", "5") is None
    assert registry.new_check("min", "5")("7") is True


def test_build_registry_returns_isolated_instances() -> None:
    first = build_registry()
    second = build_registry()
    first.register(RegistryKind.CHECK, "custom", lambda arg: True)
    assert second.check("custom") is None


def test_default_registry_is_shared() -> None:
    assert default_registry() is default_registry()


def test_concurrent_registration_and_lookup() -> None:
    registry = build_registry()
    errors: list[BaseException] = []

    def register(offset: int) -> None:
        try:
            for index in range(200):
                registry.register(RegistryKind.CHECK, f"check-{offset}-{index}", lambda arg: True)
                assert registry.check("isnum") is not None
        except BaseException as exc:  # noqa: BLE001 - surfaced through the list
            errors.append(exc)

    threads = [threading.Thread(target=register, args=(offset,)) for offset in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert errors == []
    assert len(registry.names(RegistryKind.CHECK)) == 1 + 4 * 200

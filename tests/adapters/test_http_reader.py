"""Network reader tests driven through ``httpx.MockTransport``."""

from __future__ import annotations

import httpx
import pytest

from lib_config_pipeline.adapters.readers.http import HTTPReader
from lib_config_pipeline.application.registry import RegistryKind
from lib_config_pipeline.application.resolve import resolve_sources
from lib_config_pipeline.core import build_registry
from lib_config_pipeline.domain.errors import AllSourcesFailed, SourceUnreachable
from lib_config_pipeline.domain.store import PropertyStore


def _reader(handler) -> HTTPReader:
    return HTTPReader(client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_success_returns_body() -> None:
    requests: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(str(request.url))
        return httpx.Response(200, content=b'{"a": 1}')

    assert _reader(handler)("https://cfg.example/app.json") == b'{"a": 1}'
    assert requests == ["https://cfg.example/app.json"]


def test_redirects_are_followed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old.json":
            return httpx.Response(302, headers={"Location": "https://cfg.example/new.json"})
        return httpx.Response(200, content=b"{}")

    assert _reader(handler)("https://cfg.example/old.json") == b"{}"


@pytest.mark.parametrize("status", [404, 500, 503])
def test_non_success_status_is_unreachable(status: int) -> None:
    reader = _reader(lambda request: httpx.Response(status, content=b"nope"))
    with pytest.raises(SourceUnreachable) as excinfo:
        reader("http://cfg.example/app.json")
    assert str(status) in excinfo.value.reason


def test_transport_error_is_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SourceUnreachable) as excinfo:
        _reader(handler)("http://cfg.example/app.json")
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_remote_failure_falls_back_to_next_source(tmp_path) -> None:
    local = tmp_path / "local.json"
    local.write_bytes(b'{"origin": "local"}')
    registry = build_registry()
    reader = _reader(lambda request: httpx.Response(503))
    registry.register(RegistryKind.READER, "https", reader)
    store = PropertyStore({"keys": {"config": ["https://cfg.example/app.json", str(local)]}})
    assert resolve_sources(store, registry) == str(local)


def test_every_remote_failure_is_reported() -> None:
    registry = build_registry()
    reader = _reader(lambda request: httpx.Response(404 if request.url.host == "a.example" else 500))
    registry.register(RegistryKind.READER, "http", reader)
    store = PropertyStore({"keys": {"config": ["http://a.example/c.json", "http://b.example/c.json"]}})
    with pytest.raises(AllSourcesFailed) as excinfo:
        resolve_sources(store, registry)
    reasons = [error.reason for error in excinfo.value.errors]
    assert "404" in reasons[0] and "500" in reasons[1]

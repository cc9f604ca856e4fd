from __future__ import annotations

import asyncio
from typing import Any, ClassVar

import httpx
import pytest

from webbaseline import http
from webbaseline.constants import FEATURES_URL
from webbaseline.exceptions import (
    BaselineError,
    ContentError,
    HttpStatusError,
    NetworkError,
    RequestTimeoutError,
)


class _FakeAsyncClient:
    plans: ClassVar[list[object]] = []
    seen_params: ClassVar[list[dict[str, str] | None]] = []

    def __init__(self, **_: object) -> None:
        pass

    async def __aenter__(self) -> _FakeAsyncClient:
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc: BaseException | None,
        _tb: object | None,
    ) -> None:
        return None

    async def get(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        _FakeAsyncClient.seen_params.append(params)
        plan = _FakeAsyncClient.plans.pop(0)
        if isinstance(plan, Exception):
            raise plan
        if isinstance(plan, tuple):
            status_code, text = plan
            return httpx.Response(
                status_code,
                text=text,
                request=httpx.Request("GET", url, params=params),
            )
        raise AssertionError


def _reset_plans(*plans: object) -> None:
    _FakeAsyncClient.plans = list(plans)
    _FakeAsyncClient.seen_params = []


def _fetch(url: str = FEATURES_URL, **kwargs: Any) -> Any:
    return asyncio.run(http.fetch_json(url, **kwargs))


def test_exception_messages() -> None:
    assert "Unable to connect" in str(NetworkError(FEATURES_URL))
    assert "Boom" in str(NetworkError(FEATURES_URL, cause="Boom"))
    assert "timed out" in str(RequestTimeoutError(FEATURES_URL))
    assert "HTTP 503" in str(HttpStatusError(503, FEATURES_URL))
    assert "malformed JSON" in str(ContentError(FEATURES_URL))
    assert "empty" in str(ContentError(FEATURES_URL, reason="empty"))
    assert issubclass(ContentError, BaselineError)


def test_fetch_json_success(monkeypatch: pytest.MonkeyPatch) -> None:
    _reset_plans((200, '{"data": []}'))
    monkeypatch.setattr(http.httpx, "AsyncClient", _FakeAsyncClient)

    result = _fetch(params={"a": "1"})

    assert result == {"data": []}
    assert _FakeAsyncClient.seen_params[-1] == {"a": "1"}


def test_fetch_json_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    _reset_plans(httpx.TimeoutException("slow"))
    monkeypatch.setattr(http.httpx, "AsyncClient", _FakeAsyncClient)

    with pytest.raises(RequestTimeoutError):
        _fetch()


def test_fetch_json_connect_retry_then_success(monkeypatch: pytest.MonkeyPatch) -> None:
    connect_exc = httpx.ConnectError("conn", request=httpx.Request("GET", FEATURES_URL))
    _reset_plans(connect_exc, (200, '{"data": [1]}'))
    monkeypatch.setattr(http.httpx, "AsyncClient", _FakeAsyncClient)

    result = _fetch()

    assert result == {"data": [1]}
    assert len(_FakeAsyncClient.seen_params) == 2


def test_fetch_json_connect_retry_then_fail(monkeypatch: pytest.MonkeyPatch) -> None:
    connect_exc = httpx.ConnectError("conn", request=httpx.Request("GET", FEATURES_URL))
    _reset_plans(connect_exc, connect_exc)
    monkeypatch.setattr(http.httpx, "AsyncClient", _FakeAsyncClient)

    with pytest.raises(NetworkError):
        _fetch()


def test_fetch_json_request_error(monkeypatch: pytest.MonkeyPatch) -> None:
    req_exc = httpx.RequestError("bad", request=httpx.Request("GET", FEATURES_URL))
    _reset_plans(req_exc)
    monkeypatch.setattr(http.httpx, "AsyncClient", _FakeAsyncClient)

    with pytest.raises(NetworkError):
        _fetch()


def test_fetch_json_invalid_url(monkeypatch: pytest.MonkeyPatch) -> None:
    _reset_plans(httpx.InvalidURL("Invalid port: ':1'"))
    monkeypatch.setattr(http.httpx, "AsyncClient", _FakeAsyncClient)

    with pytest.raises(NetworkError) as excinfo:
        _fetch("http://[::1")
    assert "InvalidURL" in str(excinfo.value)
    assert len(_FakeAsyncClient.seen_params) == 1


def test_fetch_json_deeply_nested_content(monkeypatch: pytest.MonkeyPatch) -> None:
    _reset_plans((200, "[" * 200_000 + "]" * 200_000))
    monkeypatch.setattr(http.httpx, "AsyncClient", _FakeAsyncClient)

    with pytest.raises(ContentError):
        _fetch()


def test_fetch_json_non_200(monkeypatch: pytest.MonkeyPatch) -> None:
    _reset_plans((500, "error"))
    monkeypatch.setattr(http.httpx, "AsyncClient", _FakeAsyncClient)

    with pytest.raises(HttpStatusError) as excinfo:
        _fetch()
    assert excinfo.value.status_code == 500


def test_fetch_json_empty_content(monkeypatch: pytest.MonkeyPatch) -> None:
    _reset_plans((200, "   "))
    monkeypatch.setattr(http.httpx, "AsyncClient", _FakeAsyncClient)

    with pytest.raises(ContentError):
        _fetch()


def test_fetch_json_malformed_content(monkeypatch: pytest.MonkeyPatch) -> None:
    _reset_plans((200, "<html>not json</html>"))
    monkeypatch.setattr(http.httpx, "AsyncClient", _FakeAsyncClient)

    with pytest.raises(ContentError):
        _fetch()


def test_shared_client_is_reused(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[_FakeAsyncClient] = []

    class _CountingClient(_FakeAsyncClient):
        def __init__(self, **kwargs: object) -> None:
            super().__init__(**kwargs)
            created.append(self)

    _reset_plans((200, "{}"), (200, "{}"))
    monkeypatch.setattr(http.httpx, "AsyncClient", _CountingClient)

    async def _run() -> None:
        async with http.use_shared_client():
            await http.fetch_json(FEATURES_URL)
            await http.fetch_json(FEATURES_URL)

    asyncio.run(_run())

    assert len(created) == 1
    assert http._SHARED_CLIENT.get() is None


def test_fetch_feature_catalog_uses_url(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, float]] = []

    async def _fake_fetch_json(
        url: str,
        params: dict[str, str] | None = None,
        timeout: float = 10.0,
    ) -> object:
        _ = params
        calls.append((url, timeout))
        return {"data": []}

    monkeypatch.setattr(http, "fetch_json", _fake_fetch_json)

    assert asyncio.run(http.fetch_feature_catalog()) == {"data": []}
    assert asyncio.run(http.fetch_feature_catalog("https://example.test/f", timeout=2.0)) == {
        "data": []
    }
    assert calls == [(FEATURES_URL, 10.0), ("https://example.test/f", 2.0)]

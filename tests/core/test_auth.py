"""Testes para talo.core.auth (providers de token e TaloTokenManager)."""

from __future__ import annotations

import asyncio
import base64
import gc
import json

import httpx
import pytest

from talo.core.auth import (
    ONE_HOUR_SECONDS,
    REFRESH_WINDOW_SECONDS,
    CachedToken,
    StaticTokenProvider,
    TaloTokenManager,
    extract_jwt_expiration,
)
from talo.core.errors import TaloError

BASE_URL = "https://api.talo.com.ar"


def _b64url(data: dict[str, object]) -> str:
    raw = json.dumps(data).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _jwt(exp: float | None) -> str:
    claims: dict[str, object] = {"sub": "user-1"}
    if exp is not None:
        claims["exp"] = exp
    return f"{_b64url({'alg': 'HS256', 'typ': 'JWT'})}.{_b64url(claims)}.signature"


def _token_response(token: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={"message": "ok", "error": False, "code": 200, "data": {"token": token}},
    )


class _Clock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _manager(
    handler,
    *,
    clock: _Clock | None = None,
    headers: dict[str, str] | None = None,
) -> TaloTokenManager:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TaloTokenManager(
        base_url=BASE_URL,
        client_id="client-1",
        client_secret="secret-1",
        user_id="user-1",
        http_client=http_client,
        headers=headers,
        clock=clock or _Clock(1_000.0),
    )


class TestExtractJwtExpiration:
    """Testes para leitura do claim exp."""

    def test_reads_exp_claim(self) -> None:
        assert extract_jwt_expiration(_jwt(1_700_000_000)) == 1_700_000_000.0

    def test_opaque_token_returns_none(self) -> None:
        assert extract_jwt_expiration("opaque-token") is None

    def test_missing_exp_returns_none(self) -> None:
        assert extract_jwt_expiration(_jwt(None)) is None

    def test_non_numeric_exp_returns_none(self) -> None:
        token = f"{_b64url({'alg': 'none'})}.{_b64url({'exp': 'soon'})}.sig"
        assert extract_jwt_expiration(token) is None

    def test_invalid_base64_returns_none(self) -> None:
        assert extract_jwt_expiration("a.%%%.c") is None

    def test_non_object_payload_returns_none(self) -> None:
        payload = base64.urlsafe_b64encode(b"[1, 2]").decode("ascii")
        assert extract_jwt_expiration(f"h.{payload}.s") is None


class TestCachedToken:
    """Testes para a janela de renovação."""

    def test_fresh_outside_refresh_window(self) -> None:
        token = CachedToken(value="t", expires_at=10_000.0)
        assert token.is_fresh(10_000.0 - REFRESH_WINDOW_SECONDS - 1)

    def test_stale_inside_refresh_window(self) -> None:
        token = CachedToken(value="t", expires_at=10_000.0)
        assert not token.is_fresh(10_000.0 - REFRESH_WINDOW_SECONDS)

    def test_without_expiration_is_fresh(self) -> None:
        assert CachedToken(value="t", expires_at=None).is_fresh(1e12)


class TestStaticTokenProvider:
    """Testes para o provider estático."""

    @pytest.mark.asyncio
    async def test_returns_token_even_when_forced(self) -> None:
        provider = StaticTokenProvider("static-token")
        assert await provider.get_access_token() == "static-token"
        assert await provider.get_access_token(force_refresh=True) == "static-token"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_token_raises(self, value: str) -> None:
        with pytest.raises(ValueError):
            StaticTokenProvider(value)


class TestTaloTokenManagerInit:
    """Testes de validação de credenciais."""

    def test_missing_credentials_raise(self) -> None:
        with pytest.raises(ValueError, match="client_secret"):
            TaloTokenManager(
                base_url=BASE_URL,
                client_id="client-1",
                client_secret="",
                user_id="user-1",
                http_client=httpx.AsyncClient(),
            )


class TestTaloTokenManagerFetch:
    """Testes para emissão e cache de tokens."""

    @pytest.mark.asyncio
    async def test_exchanges_credentials_on_first_call(self) -> None:
        captured: list[httpx.Request] = []
        token = _jwt(1_000.0 + ONE_HOUR_SECONDS)

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return _token_response(token)

        manager = _manager(handler, headers={"Authorization": "Bearer stale", "x-app": "shop"})
        result = await manager.get_access_token()

        assert result == token
        assert len(captured) == 1
        request = captured[0]
        assert request.method == "POST"
        assert str(request.url) == f"{BASE_URL}/users/user-1/tokens"
        assert json.loads(request.content) == {
            "client_id": "client-1",
            "client_secret": "secret-1",
        }
        assert "authorization" not in request.headers
        assert request.headers["x-app"] == "shop"

    @pytest.mark.asyncio
    async def test_user_id_is_escaped_in_path(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return _token_response("opaque")

        manager = TaloTokenManager(
            base_url=f"{BASE_URL}/",
            client_id="client-1",
            client_secret="secret-1",
            user_id="user/1",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        await manager.get_access_token()

        assert captured[0].url.raw_path == b"/users/user%2F1/tokens"

    @pytest.mark.asyncio
    async def test_reuses_cached_token(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return _token_response(_jwt(1_000.0 + ONE_HOUR_SECONDS))

        manager = _manager(handler)
        first = await manager.get_access_token()
        second = await manager.get_access_token()

        assert first == second
        assert calls == 1

    @pytest.mark.asyncio
    async def test_refreshes_inside_window(self) -> None:
        clock = _Clock(1_000.0)
        expires_at = 1_000.0 + ONE_HOUR_SECONDS
        tokens = iter([_jwt(expires_at), _jwt(expires_at + ONE_HOUR_SECONDS)])

        def handler(request: httpx.Request) -> httpx.Response:
            return _token_response(next(tokens))

        manager = _manager(handler, clock=clock)
        first = await manager.get_access_token()

        clock.now = expires_at - REFRESH_WINDOW_SECONDS - 1
        assert await manager.get_access_token() == first

        clock.now = expires_at - REFRESH_WINDOW_SECONDS + 1
        second = await manager.get_access_token()
        assert second != first
        assert manager.cached_token is not None
        assert manager.cached_token.expires_at == expires_at + ONE_HOUR_SECONDS

    @pytest.mark.asyncio
    async def test_opaque_token_uses_one_hour_fallback(self) -> None:
        manager = _manager(lambda request: _token_response("opaque-token"))
        await manager.get_access_token()

        assert manager.cached_token == CachedToken(
            value="opaque-token",
            expires_at=1_000.0 + ONE_HOUR_SECONDS,
        )

    @pytest.mark.asyncio
    async def test_already_expired_jwt_uses_one_hour_fallback(self) -> None:
        manager = _manager(lambda request: _token_response(_jwt(500.0)))
        await manager.get_access_token()

        assert manager.cached_token is not None
        assert manager.cached_token.expires_at == 1_000.0 + ONE_HOUR_SECONDS

    @pytest.mark.asyncio
    async def test_force_refresh_ignores_cache(self) -> None:
        tokens = iter(["token-1", "token-2"])
        manager = _manager(lambda request: _token_response(next(tokens)))

        assert await manager.get_access_token() == "token-1"
        assert await manager.get_access_token(force_refresh=True) == "token-2"
        assert await manager.get_access_token() == "token-2"

    @pytest.mark.asyncio
    async def test_invalidate_drops_cached_token(self) -> None:
        tokens = iter(["token-1", "token-2"])
        manager = _manager(lambda request: _token_response(next(tokens)))

        await manager.get_access_token()
        manager.invalidate()

        assert manager.cached_token is None
        assert await manager.get_access_token() == "token-2"


class TestTaloTokenManagerConcurrency:
    """Testes de deduplicação de refresh."""

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_one_exchange(self) -> None:
        calls = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return _token_response("shared-token")

        manager = _manager(handler)
        results = await asyncio.gather(*(manager.get_access_token() for _ in range(5)))

        assert results == ["shared-token"] * 5
        assert calls == 1
        assert not manager.refresh_in_flight

    @pytest.mark.asyncio
    async def test_forced_refresh_joins_in_flight_refresh(self) -> None:
        calls = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return _token_response(f"token-{calls}")

        manager = _manager(handler)
        results = await asyncio.gather(
            manager.get_access_token(),
            manager.get_access_token(force_refresh=True),
        )

        assert results == ["token-1", "token-1"]
        assert calls == 1

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_refresh(self) -> None:
        gate = asyncio.Event()
        calls = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            await gate.wait()
            return _token_response("late-token")

        manager = _manager(handler)
        waiter = asyncio.create_task(manager.get_access_token())
        await asyncio.sleep(0)
        assert manager.refresh_in_flight

        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        gate.set()
        assert await manager.get_access_token() == "late-token"
        assert calls == 1
        assert manager.cached_token is not None

    @pytest.mark.asyncio
    async def test_failed_refresh_without_waiters_is_not_reported_unhandled(self) -> None:
        """Refresh que falha depois de todos cancelarem não gera erro no loop."""
        gate = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            await gate.wait()
            return httpx.Response(500, text="boom")

        loop = asyncio.get_running_loop()
        reported: list[dict] = []
        previous = loop.get_exception_handler()
        loop.set_exception_handler(lambda _loop, context: reported.append(context))
        try:
            manager = _manager(handler)
            waiter = asyncio.create_task(manager.get_access_token())
            await asyncio.sleep(0)
            waiter.cancel()
            with pytest.raises(asyncio.CancelledError):
                await waiter
            del waiter

            gate.set()
            while manager.refresh_in_flight:
                await asyncio.sleep(0)
            await asyncio.sleep(0)
            gc.collect()
        finally:
            loop.set_exception_handler(previous)

        assert reported == []
        assert manager.cached_token is None


class TestTaloTokenManagerFailures:
    """Testes de falhas do endpoint de tokens."""

    @pytest.mark.asyncio
    async def test_error_response_raises_normalized_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                401,
                json={"message": "Invalid credentials", "code": 401},
                headers={"x-request-id": "req-auth"},
            )

        manager = _manager(handler)

        with pytest.raises(TaloError) as exc_info:
            await manager.get_access_token()

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid credentials"
        assert exc_info.value.request_id == "req-auth"
        assert manager.cached_token is None
        assert not manager.refresh_in_flight

    @pytest.mark.asyncio
    async def test_failure_does_not_block_next_attempt(self) -> None:
        responses = iter([httpx.Response(500, text="boom"), _token_response("recovered")])
        manager = _manager(lambda request: next(responses))

        with pytest.raises(TaloError) as exc_info:
            await manager.get_access_token()
        assert exc_info.value.message == "Talo API request failed with HTTP 500"

        assert await manager.get_access_token() == "recovered"

    @pytest.mark.asyncio
    async def test_unexpected_success_body_raises(self) -> None:
        body = b'{"data": {}}'
        manager = _manager(
            lambda request: httpx.Response(
                200, content=body, headers={"content-type": "application/json"}
            )
        )

        with pytest.raises(TaloError) as exc_info:
            await manager.get_access_token()

        error = exc_info.value
        assert error.message == "Unexpected response from Talo auth endpoint"
        assert error.status_code == 200
        assert error.details
        assert error.raw_body == '{"data": {}}'

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        manager = _manager(handler)

        with pytest.raises(httpx.ConnectError):
            await manager.get_access_token()
        assert not manager.refresh_in_flight

"""YahooProvider error mapping through the real httpx and Authlib clients.

Only the network is replaced (``httpx.MockTransport``); the exceptions reaching the
provider are the ones the installed client libraries raise.
"""

from datetime import datetime, timezone
from urllib.parse import parse_qs

import httpx
import pytest
from authlib.integrations.base_client import OAuthError
from pytest import MonkeyPatch

from yahoo_auth.contracts import ExchangeError, RefreshError, TransportError
from yahoo_auth.provider import PROFILE_URL, TOKEN_URL, YahooProvider
from yahoo_auth.session import YahooSession
from tests.provider_testkit import patch_http_transport, patch_oauth_transport

EXPIRY = datetime(2030, 1, 1, tzinfo=timezone.utc)


def _refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def _form(request: httpx.Request) -> dict[str, list[str]]:
    return parse_qs(request.content.decode())


@pytest.fixture
def authorized_session() -> YahooSession:
    return YahooSession(access_token="at", refresh_token="rt", expires_at=EXPIRY)


class TestFetchUser:
    """fetch_user() over a real httpx client."""

    @pytest.mark.asyncio
    async def test_happy_path(
        self, monkeypatch: MonkeyPatch, provider: YahooProvider, authorized_session: YahooSession
    ) -> None:
        requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={"profile": {"nickname": "jdoe", "guid": "123", "location": "US"}},
            )

        patch_http_transport(monkeypatch, _handler)

        user = await provider.fetch_user(authorized_session)

        assert user.user_id == "123"
        assert user.nick_name == "jdoe"
        assert user.avatar_url == ""
        assert len(requests) == 1
        assert str(requests[0].url) == PROFILE_URL
        assert requests[0].method == "GET"
        assert requests[0].headers["Authorization"] == "Bearer at"

    @pytest.mark.asyncio
    async def test_connection_refused(
        self, monkeypatch: MonkeyPatch, provider: YahooProvider, authorized_session: YahooSession
    ) -> None:
        patch_http_transport(monkeypatch, _refuse)

        with pytest.raises(TransportError) as exc:
            await provider.fetch_user(authorized_session)

        assert isinstance(exc.value.__cause__, httpx.ConnectError)
        assert exc.value.user.access_token == "at"
        assert exc.value.user.refresh_token == "rt"
        assert exc.value.user.user_id == ""

    @pytest.mark.asyncio
    async def test_server_error_status(
        self, monkeypatch: MonkeyPatch, provider: YahooProvider, authorized_session: YahooSession
    ) -> None:
        patch_http_transport(monkeypatch, lambda request: httpx.Response(503, text="down"))

        with pytest.raises(TransportError) as exc:
            await provider.fetch_user(authorized_session)
        assert exc.value.status_code == 503
        assert exc.value.user.nick_name == ""

    @pytest.mark.asyncio
    async def test_unencodable_token_is_a_transport_error(
        self, monkeypatch: MonkeyPatch, provider: YahooProvider
    ) -> None:
        requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={})

        patch_http_transport(monkeypatch, _handler)

        with pytest.raises(TransportError) as exc:
            await provider.fetch_user(YahooSession(access_token="tök"))

        assert isinstance(exc.value.__cause__, UnicodeEncodeError)
        assert exc.value.user.access_token == "tök"
        assert requests == []


class TestRefreshToken:
    """refresh_token() over a real Authlib AsyncOAuth2Client."""

    @pytest.mark.asyncio
    async def test_carries_refresh_token_forward(
        self, monkeypatch: MonkeyPatch, provider: YahooProvider
    ) -> None:
        requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200, json={"access_token": "new-at", "token_type": "bearer", "expires_in": 3600}
            )

        patch_oauth_transport(monkeypatch, _handler)

        token = await provider.refresh_token("rt")

        assert token.access_token == "new-at"
        assert token.refresh_token == "rt"
        assert token.expires_at is not None

        assert len(requests) == 1
        request = requests[0]
        assert str(request.url) == TOKEN_URL
        assert request.method == "POST"
        assert request.headers["Authorization"].startswith("Basic ")
        form = _form(request)
        assert form["grant_type"] == ["refresh_token"]
        assert form["refresh_token"] == ["rt"]
        assert "scope" not in form

    @pytest.mark.asyncio
    async def test_connection_refused(
        self, monkeypatch: MonkeyPatch, provider: YahooProvider
    ) -> None:
        patch_oauth_transport(monkeypatch, _refuse)

        with pytest.raises(RefreshError) as exc:
            await provider.refresh_token("rt")
        assert isinstance(exc.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_server_error(self, monkeypatch: MonkeyPatch, provider: YahooProvider) -> None:
        patch_oauth_transport(monkeypatch, lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(RefreshError) as exc:
            await provider.refresh_token("rt")
        assert isinstance(exc.value.__cause__, httpx.HTTPStatusError)
        assert exc.value.error == "refresh_failed"

    @pytest.mark.asyncio
    async def test_invalid_grant(self, monkeypatch: MonkeyPatch, provider: YahooProvider) -> None:
        patch_oauth_transport(
            monkeypatch,
            lambda request: httpx.Response(
                400, json={"error": "invalid_grant", "error_description": "token expired"}
            ),
        )

        with pytest.raises(RefreshError) as exc:
            await provider.refresh_token("rt")
        assert isinstance(exc.value.__cause__, OAuthError)
        assert str(exc.value) == str(exc.value.__cause__)
        assert "invalid_grant" in str(exc.value)


class TestExchangeCode:
    """exchange_code() over a real Authlib AsyncOAuth2Client."""

    @pytest.mark.asyncio
    async def test_happy_path(self, monkeypatch: MonkeyPatch, provider: YahooProvider) -> None:
        requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200, json={"access_token": "at", "refresh_token": "rt", "token_type": "bearer"}
            )

        patch_oauth_transport(monkeypatch, _handler)

        token = await provider.exchange_code("the-code")

        assert token.access_token == "at"
        assert token.refresh_token == "rt"
        form = _form(requests[0])
        assert form["grant_type"] == ["authorization_code"]
        assert form["code"] == ["the-code"]
        assert form["redirect_uri"] == ["https://server/yahoo/callback"]

    @pytest.mark.asyncio
    async def test_connection_refused(
        self, monkeypatch: MonkeyPatch, provider: YahooProvider
    ) -> None:
        patch_oauth_transport(monkeypatch, _refuse)

        with pytest.raises(ExchangeError) as exc:
            await provider.exchange_code("the-code")
        assert isinstance(exc.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_server_error(self, monkeypatch: MonkeyPatch, provider: YahooProvider) -> None:
        patch_oauth_transport(monkeypatch, lambda request: httpx.Response(502, text="bad gateway"))

        with pytest.raises(ExchangeError) as exc:
            await provider.exchange_code("the-code")
        assert isinstance(exc.value.__cause__, httpx.HTTPStatusError)

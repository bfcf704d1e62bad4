"""Yahoo OAuth2 provider implementation.

Builds the authorization-code URL, delegates token exchange and refresh to Authlib,
and normalizes the Yahoo social profile into a ``User``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from authlib.integrations.base_client import OAuthError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri
from mcp.shared._httpx_utils import create_mcp_http_client
from pydantic import ConfigDict, Field, ValidationError, field_validator

from .config import YahooAuthConfigModel
from .contracts import (
    DecodeError,
    ExchangeError,
    RefreshableProvider,
    RefreshError,
    TransportError,
    UrlConstructionError,
)
from .models import AuthBaseModel, OAuth2Config, Token, User
from .session import YahooSession

logger = logging.getLogger(__name__)

AUTH_URL = "https://api.login.yahoo.com/oauth2/request_auth"
TOKEN_URL = "https://api.login.yahoo.com/oauth2/get_token"
PROFILE_URL = "https://social.yahooapis.com/v1/user/GUID/profile?format=json"


class _YahooImage(AuthBaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    image_url: str = Field(default="", alias="imageURL")

    @field_validator("image_url", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class _YahooProfile(AuthBaseModel):
    """Subset of the social profile used to normalize User."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    nickname: str = ""
    location: str = ""
    guid: str = ""
    image: _YahooImage = Field(default_factory=_YahooImage)

    @field_validator("nickname", "location", "guid", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("image", mode="before")
    @classmethod
    def _null_image(cls, value: Any) -> Any:
        return {} if value is None else value


class _YahooProfileResponse(AuthBaseModel):
    """`/v1/user/GUID/profile` response envelope."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    profile: _YahooProfile = Field(default_factory=_YahooProfile)

    @field_validator("profile", mode="before")
    @classmethod
    def _null_profile(cls, value: Any) -> Any:
        return {} if value is None else value


class YahooProvider(RefreshableProvider):
    """Yahoo OAuth2 provider that uses real HTTP calls."""

    provider_name = "yahoo"

    def __init__(self, client_key: str, secret: str, callback_url: str, *scopes: str):
        self.client_key = client_key
        self.secret = secret
        self.callback_url = callback_url
        self.config = OAuth2Config(
            client_id=client_key,
            client_secret=secret,
            redirect_url=callback_url,
            scopes=tuple(scopes),
            auth_url=AUTH_URL,
            token_url=TOKEN_URL,
        )

    @classmethod
    def from_config(cls, yahoo_config: YahooAuthConfigModel) -> YahooProvider:
        return cls(
            yahoo_config.client_id,
            yahoo_config.client_secret,
            yahoo_config.callback_url,
            *yahoo_config.scopes,
        )

    def debug(self, enabled: bool) -> None:
        """No-op; kept for the host's provider interface."""

    def begin_auth(self, state: str) -> YahooSession:
        """Return a session holding the Yahoo authorization URL for ``state``."""
        try:
            url = prepare_grant_uri(
                self.config.auth_url,
                self.config.client_id,
                "code",
                redirect_uri=self.config.redirect_url,
                scope=list(self.config.scopes) or None,
                state=state,
            )
        except (TypeError, ValueError) as exc:
            raise UrlConstructionError("Yahoo authorization URL could not be built") from exc
        return YahooSession(auth_url=url)

    async def fetch_user(self, session: YahooSession) -> User:
        """Fetch the Yahoo profile for an authorized session.

        Errors raised here expose the partially populated user as ``exc.user``:
        token fields are always set, profile fields only after a successful decode.

        Raises:
            TransportError: If the request fails or returns a non-2xx status
            DecodeError: If the response is not a profile payload
        """
        user = User(
            provider=self.provider_name,
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
        )

        try:
            async with create_mcp_http_client() as client:
                resp = await client.get(
                    PROFILE_URL,
                    headers={"Authorization": f"Bearer {session.access_token}"},
                )
        except httpx.HTTPError as exc:
            logger.warning(
                "Yahoo profile request failed",
                extra={"provider": self.provider_name, "endpoint": "profile"},
            )
            raise TransportError(
                "Yahoo profile request failed", user=user, status_code=502
            ) from exc
        except (httpx.InvalidURL, ValueError, TypeError) as exc:
            # Covers header values httpx cannot encode (UnicodeEncodeError)
            logger.warning(
                "Yahoo profile request could not be built",
                extra={"provider": self.provider_name, "endpoint": "profile"},
            )
            raise TransportError(
                "Yahoo profile request could not be built", user=user, status_code=400
            ) from exc

        if not 200 <= resp.status_code < 300:
            logger.warning(
                "Yahoo profile endpoint returned non-2xx",
                extra={
                    "provider": self.provider_name,
                    "endpoint": "profile",
                    "status_code": resp.status_code,
                },
            )
            raise TransportError(
                "Yahoo profile request failed", user=user, status_code=resp.status_code
            )

        return self._user_from_response(resp, user)

    def unmarshal_session(self, data: str) -> YahooSession:
        try:
            return YahooSession.model_validate_json(data)
        except ValidationError as exc:
            raise DecodeError("Yahoo session could not be deserialized") from exc

    def refresh_token_available(self) -> bool:
        return True

    async def refresh_token(self, refresh_token: str) -> Token:
        """Get a new access token from the token endpoint using ``refresh_token``."""
        try:
            async with self._oauth_client() as client:
                token = await client.refresh_token(
                    self.config.token_url, refresh_token=refresh_token
                )
        except (OAuthError, httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "Yahoo token refresh failed",
                extra={"provider": self.provider_name, "endpoint": "token"},
            )
            raise RefreshError(str(exc)) from exc

        return Token.from_oauth2_token(token)

    async def exchange_code(self, code: str) -> Token:
        """Exchange an authorization code received on the callback for a token."""
        try:
            async with self._oauth_client() as client:
                token = await client.fetch_token(
                    self.config.token_url, code=code, grant_type="authorization_code"
                )
        except (OAuthError, httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "Yahoo code exchange failed",
                extra={"provider": self.provider_name, "endpoint": "token"},
            )
            raise ExchangeError(str(exc)) from exc

        if not token.get("access_token"):
            raise ExchangeError("Invalid token received from provider")
        return Token.from_oauth2_token(token)

    # ── helpers ──────────────────────────────────────────────────────────────
    def _oauth_client(self) -> AsyncOAuth2Client:
        # No scope: refresh requests carry only the refresh token.
        return AsyncOAuth2Client(
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            redirect_uri=self.config.redirect_url,
        )

    def _user_from_response(self, resp: Any, user: User) -> User:
        try:
            payload = resp.json()
        except ValueError as exc:
            logger.warning(
                "Yahoo profile endpoint returned invalid JSON",
                extra={
                    "provider": self.provider_name,
                    "endpoint": "profile",
                    "status_code": resp.status_code,
                },
            )
            raise DecodeError(
                "Yahoo profile response was invalid", user=user, status_code=resp.status_code
            ) from exc

        if payload is None:
            payload = {}

        try:
            parsed = _YahooProfileResponse.model_validate(payload)
        except ValidationError as exc:
            logger.warning(
                "Yahoo profile endpoint returned unexpected JSON",
                extra={
                    "provider": self.provider_name,
                    "endpoint": "profile",
                    "status_code": resp.status_code,
                },
            )
            raise DecodeError(
                "Yahoo profile response was invalid", user=user, status_code=resp.status_code
            ) from exc

        profile = parsed.profile
        return user.model_copy(
            update={
                # Yahoo does not expose the email address
                "email": "",
                "name": profile.nickname,
                "nick_name": profile.nickname,
                "user_id": profile.guid,
                "location": profile.location,
                "avatar_url": profile.image.image_url,
                "raw_data": payload,
            }
        )

"""Contracts and shared errors for the Yahoo provider.

The host framework keys providers by ``provider_name`` and drives them through the
``Provider`` protocol. Providers able to renew tokens also satisfy
``RefreshableProvider``. Sessions travel between the redirect and the callback as
``ProviderSession`` values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import Token, User


class ProviderError(Exception):
    """Standardized provider error with HTTP-style status information."""

    error = "provider_error"

    def __init__(
        self,
        description: str | None = None,
        *,
        error: str | None = None,
        status_code: int = 400,
    ):
        self.error = error or self.error
        self.description = description
        self.status_code = status_code
        super().__init__(description or self.error)


class UrlConstructionError(ProviderError):
    """The authorization URL could not be built."""

    error = "url_construction_failed"


class _UserBearingError(ProviderError):
    """Error raised by ``fetch_user``; carries the partially populated user."""

    def __init__(
        self,
        description: str | None = None,
        *,
        user: User | None = None,
        error: str | None = None,
        status_code: int = 400,
    ):
        super().__init__(description, error=error, status_code=status_code)
        self.user = user


class TransportError(_UserBearingError):
    """The profile request failed or returned a non-2xx status."""

    error = "transport_failed"


class DecodeError(_UserBearingError):
    """A payload (profile response or serialized session) could not be decoded."""

    error = "decode_failed"


class RefreshError(ProviderError):
    """The token source failed to refresh an access token."""

    error = "refresh_failed"


class ExchangeError(ProviderError):
    """The authorization code could not be exchanged for a token."""

    error = "exchange_failed"


class MissingAuthURLError(ProviderError):
    """The session was never given an authorization URL."""

    error = "missing_auth_url"


@runtime_checkable
class ProviderSession(Protocol):
    """Opaque per-login state the host persists between redirect and callback."""

    def get_auth_url(self) -> str:
        """Return the URL the user must be redirected to."""

    def marshal(self) -> str:
        """Serialize the session to a string."""

    async def authorize(self, provider: Any, params: Mapping[str, str]) -> str:
        """Complete the exchange with the callback parameters; return the access token."""


@runtime_checkable
class Provider(Protocol):
    """Interface every identity provider plugin implements."""

    provider_name: str

    def debug(self, enabled: bool) -> None:
        """Toggle provider debugging."""

    def begin_auth(self, state: str) -> ProviderSession:
        """Start a login attempt bound to the anti-forgery ``state``."""

    async def fetch_user(self, session: Any) -> User:
        """Fetch and normalize the user behind an authorized session."""

    def unmarshal_session(self, data: str) -> ProviderSession:
        """Rebuild a session from its serialized form."""


@runtime_checkable
class RefreshableProvider(Provider, Protocol):
    """Provider that can renew access tokens."""

    def refresh_token_available(self) -> bool:
        """Whether the provider issues refresh tokens."""

    async def refresh_token(self, refresh_token: str) -> Token:
        """Exchange a refresh token for a new token."""


__all__ = [
    "DecodeError",
    "ExchangeError",
    "MissingAuthURLError",
    "Provider",
    "ProviderError",
    "ProviderSession",
    "RefreshError",
    "RefreshableProvider",
    "TransportError",
    "UrlConstructionError",
]

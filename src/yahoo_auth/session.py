"""Serializable per-login session for the Yahoo provider."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Mapping

from pydantic import ConfigDict, Field

from .contracts import ExchangeError, MissingAuthURLError
from .models import AuthBaseModel

if TYPE_CHECKING:
    from .provider import YahooProvider

logger = logging.getLogger(__name__)


class YahooSession(AuthBaseModel):
    """State carried from ``begin_auth`` through the callback to ``fetch_user``.

    The JSON form uses the wire field names (``AuthURL``, ``AccessToken``,
    ``RefreshToken``, ``ExpiresAt``) and round-trips exactly through
    ``YahooProvider.unmarshal_session``.
    """

    # Populated in place once the code exchange completes
    model_config = ConfigDict(extra="forbid", frozen=False, populate_by_name=True)

    auth_url: str = Field(default="", alias="AuthURL")
    access_token: str = Field(default="", alias="AccessToken")
    refresh_token: str = Field(default="", alias="RefreshToken")
    expires_at: datetime | None = Field(default=None, alias="ExpiresAt")

    def get_auth_url(self) -> str:
        if not self.auth_url:
            raise MissingAuthURLError("an AuthURL has not been set")
        return self.auth_url

    async def authorize(self, provider: YahooProvider, params: Mapping[str, str]) -> str:
        """Exchange the callback's authorization code and store the resulting tokens.

        Args:
            provider: The provider that began this login attempt
            params: Query parameters received on the callback

        Returns:
            The new access token

        Raises:
            ExchangeError: If the callback carries no code or the exchange fails
        """
        code = params.get("code")
        if not code:
            raise ExchangeError("callback parameters do not include a code")

        token = await provider.exchange_code(code)
        self.access_token = token.access_token
        self.refresh_token = token.refresh_token
        self.expires_at = token.expires_at
        logger.debug("Yahoo session authorized", extra={"provider": provider.provider_name})
        return token.access_token

    def marshal(self) -> str:
        return self.model_dump_json(by_alias=True)

    def __str__(self) -> str:
        return self.marshal()

"""Base Pydantic models for the Yahoo provider.

This module provides the base model class that all package models inherit from,
plus the value types exchanged with the host framework:

- ``OAuth2Config``: the immutable OAuth2 client configuration of one provider
- ``Token``: a token issued by the Yahoo token endpoint
- ``User``: the normalized user record returned by ``fetch_user``

Example:
    >>> from yahoo_auth.models import Token
    >>> Token(access_token="at").token_type
    'Bearer'
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthBaseModel(BaseModel):
    """Base model for all package Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable for thread safety

    Models that need mutability (e.g., sessions) override ``model_config``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class OAuth2Config(AuthBaseModel):
    """OAuth2 client configuration bound to one provider's endpoints."""

    client_id: str
    client_secret: str
    redirect_url: str
    scopes: tuple[str, ...] = ()
    auth_url: str
    token_url: str


class Token(AuthBaseModel):
    """Token returned by an exchange or refresh."""

    access_token: str
    token_type: str = "Bearer"
    refresh_token: str = ""
    expires_at: datetime | None = None

    @classmethod
    def from_oauth2_token(cls, token: Any) -> Token:
        """Build a Token from an Authlib ``OAuth2Token`` (or any token mapping)."""
        expires_at = token.get("expires_at")
        return cls(
            access_token=token.get("access_token") or "",
            token_type=token.get("token_type") or "Bearer",
            refresh_token=token.get("refresh_token") or "",
            expires_at=(
                datetime.fromtimestamp(expires_at, tz=timezone.utc)
                if expires_at is not None
                else None
            ),
        )


class User(AuthBaseModel):
    """Normalized user information returned by providers."""

    provider: str
    user_id: str = ""
    name: str = ""
    nick_name: str = ""
    location: str = ""
    avatar_url: str = ""
    email: str = ""
    access_token: str = ""
    refresh_token: str = ""
    expires_at: datetime | None = None
    raw_data: dict[str, Any] = Field(default_factory=dict)

"""Yahoo OAuth2 provider plugin.

Exposes the provider (``YahooProvider``), its session (``YahooSession``), the
normalized value types, the provider contracts and the configuration loader.

Example:
    >>> from yahoo_auth import YahooProvider
    >>> provider = YahooProvider("key", "secret", "https://example.com/callback")
    >>> session = provider.begin_auth("state")
    >>> session.get_auth_url().startswith("https://api.login.yahoo.com/oauth2/request_auth")
    True
"""

from .config import YahooAuthConfigModel, load_yahoo_config
from .contracts import (
    DecodeError,
    ExchangeError,
    MissingAuthURLError,
    Provider,
    ProviderError,
    ProviderSession,
    RefreshableProvider,
    RefreshError,
    TransportError,
    UrlConstructionError,
)
from .models import OAuth2Config, Token, User
from .provider import AUTH_URL, PROFILE_URL, TOKEN_URL, YahooProvider
from .session import YahooSession

__all__ = [
    # Provider
    "YahooProvider",
    "YahooSession",
    "AUTH_URL",
    "TOKEN_URL",
    "PROFILE_URL",
    # Values
    "OAuth2Config",
    "Token",
    "User",
    # Contracts
    "Provider",
    "RefreshableProvider",
    "ProviderSession",
    # Errors
    "ProviderError",
    "UrlConstructionError",
    "TransportError",
    "DecodeError",
    "RefreshError",
    "ExchangeError",
    "MissingAuthURLError",
    # Configuration
    "YahooAuthConfigModel",
    "load_yahoo_config",
]

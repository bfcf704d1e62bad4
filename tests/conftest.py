"""
Global pytest configuration and fixtures.
"""

import logging

import pytest

from yahoo_auth.provider import YahooProvider

_YAHOO_ENV_VARS = (
    "YAHOO_AUTH_CONFIG",
    "YAHOO_AUTH_DEBUG",
    "YAHOO_CLIENT_ID",
    "YAHOO_CLIENT_SECRET",
    "YAHOO_CALLBACK_URL",
    "YAHOO_SCOPES",
)


@pytest.fixture(autouse=True)
def isolate_yahoo_env(monkeypatch, tmp_path):
    """Keep the developer's Yahoo settings and config files out of every test.

    HOME and the working directory point at an empty temporary directory so the
    default config file locations never resolve to a real file.
    """
    for name in _YAHOO_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def provider() -> YahooProvider:
    return YahooProvider("cid", "secret", "https://server/yahoo/callback")


@pytest.fixture(autouse=True)
def restore_root_logging():
    """CLI commands reconfigure the root logger; undo that after each test."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)

"""Configuration loader for the Yahoo provider.

Client credentials are read from a YAML file with a ``yahoo:`` section::

    yahoo:
      client_id: ${YAHOO_CLIENT_ID}
      client_secret: ${YAHOO_CLIENT_SECRET}
      callback_url: https://example.com/auth/yahoo/callback
      scopes: [openid]

String values may reference environment variables as ``${VAR_NAME}``. When no
file is found the configuration is taken from ``YAHOO_CLIENT_ID``,
``YAHOO_CLIENT_SECRET``, ``YAHOO_CALLBACK_URL`` and ``YAHOO_SCOPES``.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import AuthBaseModel

logger = logging.getLogger(__name__)

ENV_VAR_PATTERN = re.compile(r"\${([A-Za-z0-9_]+)}")


class YahooAuthConfigModel(AuthBaseModel):
    """Yahoo OAuth provider configuration."""

    client_id: str
    client_secret: str
    callback_url: str
    scopes: list[str] = []


def interpolate_env(value: Any) -> Any:
    """Replace ``${VAR}`` references in strings, recursing into lists and dicts.

    Raises:
        ValueError: If a referenced environment variable is not set
    """
    if isinstance(value, str):

        def _replace(match: re.Match[str]) -> str:
            var_name = match.group(1)
            resolved = os.environ.get(var_name)
            if resolved is None:
                raise ValueError(f"Environment variable not found: {var_name}")
            return resolved

        return ENV_VAR_PATTERN.sub(_replace, value)
    if isinstance(value, list):
        return [interpolate_env(item) for item in value]
    if isinstance(value, dict):
        return {key: interpolate_env(item) for key, item in value.items()}
    return value


def load_yahoo_config(config_path: Path | None = None) -> YahooAuthConfigModel:
    """Load Yahoo provider configuration.

    Args:
        config_path: Optional path to the YAML config file.
                    If not provided, looks for:
                    1. YAHOO_AUTH_CONFIG environment variable
                    2. ~/.yahoo-auth/config.yaml
                    3. ./yahoo-auth.yml
                    and falls back to YAHOO_* environment variables.

    Returns:
        YahooAuthConfigModel with the provider settings

    Raises:
        FileNotFoundError: If an explicitly named config file doesn't exist
        ValueError: If config is invalid
    """
    if config_path is None:
        env_path = os.environ.get("YAHOO_AUTH_CONFIG")
        if env_path:
            config_path = Path(env_path)
        else:
            candidates = [Path.home() / ".yahoo-auth" / "config.yaml", Path.cwd() / "yahoo-auth.yml"]
            for candidate in candidates:
                if candidate.exists():
                    config_path = candidate
                    break

            if config_path is None:
                logger.info("No Yahoo auth config file found, using environment variables")
                return _config_from_env()

    if not config_path.exists():
        raise FileNotFoundError(f"Yahoo auth config file not found at {config_path}")

    logger.debug(f"Loading Yahoo auth config from: {config_path}")

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML config file {config_path}: {e}") from e

    if not isinstance(raw_config, dict) or "yahoo" not in raw_config:
        raise ValueError(f"Config file {config_path} has no 'yahoo' section")

    section = interpolate_env(raw_config["yahoo"])
    try:
        return YahooAuthConfigModel.model_validate(section)
    except ValidationError as e:
        raise ValueError(f"Invalid Yahoo auth config: {e}") from e


def _config_from_env() -> YahooAuthConfigModel:
    return YahooAuthConfigModel(
        client_id=os.environ.get("YAHOO_CLIENT_ID", ""),
        client_secret=os.environ.get("YAHOO_CLIENT_SECRET", ""),
        callback_url=os.environ.get("YAHOO_CALLBACK_URL", ""),
        scopes=os.environ.get("YAHOO_SCOPES", "").split(),
    )

import json
import logging
import os
import traceback
from pathlib import Path
from typing import Any, Dict, Optional

import click

from yahoo_auth.config import load_yahoo_config
from yahoo_auth.provider import YahooProvider


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """Get a boolean flag from an environment variable.

    Args:
        env_var: Name of the environment variable
        default: Default value if environment variable is not set

    Returns:
        True if the environment variable is set to "1", "true", or "yes" (case insensitive)
        False otherwise
    """
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


def configure_logging(debug: bool = False) -> None:
    """Configure logging for all modules.

    Args:
        debug: Whether to enable debug logging
    """
    if not debug:
        debug = get_env_flag("YAHOO_AUTH_DEBUG")

    log_level = logging.DEBUG if debug else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers to avoid duplicate messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    root_logger.addHandler(handler)


def load_provider(config_path: Optional[Path]) -> YahooProvider:
    """Build a provider from the config file (or environment) the user pointed at."""
    return YahooProvider.from_config(load_yahoo_config(config_path))


def format_error(error: Exception, debug: bool = False) -> Dict[str, Any]:
    """Format an error for output.

    Args:
        error: The exception that occurred
        debug: Whether to include debug information

    Returns:
        Dict containing error information
    """
    error_info = {"error": str(error)}

    code = getattr(error, "error", None)
    if isinstance(code, str):
        error_info["code"] = code

    if debug:
        error_info["traceback"] = traceback.format_exc()
        error_info["type"] = error.__class__.__name__

    return error_info


def output_result(result: Any, json_output: bool = False, debug: bool = False) -> None:
    """Output a result in either JSON or human-readable format.

    Args:
        result: The result to output
        json_output: Whether to output in JSON format
        debug: Whether to include debug information
    """
    if json_output:
        click.echo(json.dumps({"status": "ok", "result": result}, indent=2, default=str))
    elif isinstance(result, dict):
        for key, value in result.items():
            click.echo(f"{click.style(key, fg='cyan')}: {value}")
    else:
        click.echo(result)


def output_error(error: Exception, json_output: bool = False, debug: bool = False) -> None:
    """Output an error in either JSON or human-readable format.

    Args:
        error: The exception that occurred
        json_output: Whether to output in JSON format
        debug: Whether to include debug information
    """
    error_info = format_error(error, debug)

    if json_output:
        click.echo(json.dumps({"status": "error", **error_info}, indent=2))
    else:
        click.echo(f"Error: {error_info['error']}", err=True)
        if debug and "traceback" in error_info:
            click.echo("\nTraceback:", err=True)
            click.echo(error_info["traceback"], err=True)

    raise click.Abort()

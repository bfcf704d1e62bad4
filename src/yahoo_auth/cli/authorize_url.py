import secrets
from pathlib import Path
from typing import Optional

import click

from yahoo_auth.cli.utils import configure_logging, load_provider, output_error, output_result


@click.command(name="authorize-url")
@click.option("--state", help="Anti-forgery state (random when omitted)")
@click.option(
    "--config", "config_path", type=click.Path(path_type=Path), help="Path to the config file"
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def authorize_url(
    state: Optional[str], config_path: Optional[Path], json_output: bool, debug: bool
) -> None:
    """Print the Yahoo authorization URL.

    \b
    Examples:
        yahoo-auth authorize-url                 # Random state
        yahoo-auth authorize-url --state abc123  # Fixed state
    """
    configure_logging(debug)

    try:
        provider = load_provider(config_path)
        state = state or secrets.token_urlsafe(16)
        session = provider.begin_auth(state)
        if json_output:
            output_result({"url": session.get_auth_url(), "state": state}, json_output, debug)
        else:
            output_result(session.get_auth_url())
    except Exception as e:
        output_error(e, json_output, debug)

import asyncio
from pathlib import Path
from typing import Optional

import click

from yahoo_auth.cli.utils import configure_logging, load_provider, output_error, output_result


@click.command(name="refresh")
@click.option("--refresh-token", required=True, help="Refresh token issued by Yahoo")
@click.option(
    "--config", "config_path", type=click.Path(path_type=Path), help="Path to the config file"
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def refresh(refresh_token: str, config_path: Optional[Path], json_output: bool, debug: bool) -> None:
    """Exchange a refresh token for a new access token."""
    configure_logging(debug)

    try:
        provider = load_provider(config_path)
        token = asyncio.run(provider.refresh_token(refresh_token))
        output_result(token.model_dump(mode="json"), json_output, debug)
    except Exception as e:
        output_error(e, json_output, debug)

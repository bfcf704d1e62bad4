import asyncio
from pathlib import Path
from typing import Optional

import click

from yahoo_auth.cli.utils import configure_logging, load_provider, output_error, output_result
from yahoo_auth.session import YahooSession


@click.command(name="whoami")
@click.option("--access-token", required=True, help="Yahoo access token")
@click.option(
    "--config", "config_path", type=click.Path(path_type=Path), help="Path to the config file"
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def whoami(access_token: str, config_path: Optional[Path], json_output: bool, debug: bool) -> None:
    """Fetch the Yahoo profile behind an access token."""
    configure_logging(debug)

    try:
        provider = load_provider(config_path)
        session = YahooSession(access_token=access_token)
        user = asyncio.run(provider.fetch_user(session))
        output_result(
            user.model_dump(
                mode="json", exclude={"access_token", "refresh_token", "raw_data"}
            ),
            json_output,
            debug,
        )
    except Exception as e:
        output_error(e, json_output, debug)

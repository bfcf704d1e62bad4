import click

from yahoo_auth.cli.authorize_url import authorize_url
from yahoo_auth.cli.refresh import refresh
from yahoo_auth.cli.whoami import whoami


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Yahoo OAuth2 provider CLI"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(authorize_url)
cli.add_command(whoami)
cli.add_command(refresh)


if __name__ == "__main__":
    cli()

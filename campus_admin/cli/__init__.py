import logging

import click
from rich.logging import RichHandler

from campus_admin.config import CampusAdminConfig

from .commands.auth import login, logout
from .commands.resource import delete, list_, resources, save, show


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Подробный журнал запросов")
@click.option("--api-url", envvar="CAMPUS_ADMIN_API_URL", help="URL REST API (по умолчанию из настроек)")
@click.pass_context
def cli(ctx, verbose, api_url):
    """
    Campus Admin CLI: справочники учебного заведения из командной строки.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(rich_tracebacks=True)],
        )
    overrides = {"api_url": api_url} if api_url else {}
    ctx.obj = CampusAdminConfig(**overrides)


cli.add_command(login)
cli.add_command(logout)
cli.add_command(resources)
cli.add_command(list_)
cli.add_command(show)
cli.add_command(save)
cli.add_command(delete)

import click
from rich.console import Console

from campus_admin.core.session import FileTokenStore


@click.command()
@click.option("--token", prompt="Токен доступа", hide_input=True, help="Bearer-токен, выданный сервером")
@click.pass_obj
def login(settings, token):
    """
    Сохранить токен доступа для последующих команд.
    """
    console = Console()
    store = FileTokenStore(settings.token_file)
    store.set_token(token.strip())
    console.print(f"[green]Токен сохранён:[/] {settings.token_file}")


@click.command()
@click.pass_obj
def logout(settings):
    """Удалить сохранённый токен."""
    console = Console()
    FileTokenStore(settings.token_file).clear()
    console.print("[yellow]Токен удалён.[/]")

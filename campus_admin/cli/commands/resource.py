import asyncio
from typing import Any, Dict, Tuple

import click
from rich.console import Console
from rich.table import Table

from campus_admin.core.client import CampusAdminClient
from campus_admin.core.session import FileTokenStore
from campus_admin.exceptions import ApiError
from campus_admin.services import (
    RESOURCE_DEFINITIONS,
    FieldKind,
    NotificationCenter,
    ResourceController,
    UploadFile,
    create_controller,
)
from campus_admin.utils import truncate_text


TRUE_VALUES = ("1", "true", "yes", "y", "on")

resource_choice = click.Choice(sorted(RESOURCE_DEFINITIONS))


def _make_client(settings, console: Console) -> CampusAdminClient:
    def on_unauthorized(route: str) -> None:
        console.print(f"[bold red]Сессия недействительна.[/] Выполните `campus-admin login` ({route})")

    return CampusAdminClient(settings, token_store=FileTokenStore(settings.token_file), on_unauthorized=on_unauthorized)


def _print_notification(console: Console, notifications: NotificationCenter) -> None:
    current = notifications.current
    if current is None:
        return
    style = "green" if current.is_success else "red"
    console.print(f"[{style}]{current.text}[/]")


def _parse_fields(controller: ResourceController, pairs: Tuple[str, ...]) -> Dict[str, Any]:
    values = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"ожидается поле=значение, получено '{pair}'", param_hint="--field")
        name, raw = pair.split("=", 1)
        name = name.strip()
        if name not in controller.schema:
            raise click.BadParameter(f"неизвестное поле '{name}'", param_hint="--field")
        if controller.schema[name].kind is FieldKind.BOOLEAN:
            values[name] = raw.strip().lower() in TRUE_VALUES
        else:
            values[name] = raw
    return values


def _records_table(controller: ResourceController) -> Table:
    definition = controller.definition
    pagination = controller.pagination
    table = Table(
        title=f"{definition.plural.capitalize()}: страница {pagination.current_page} из {pagination.total_pages}"
        f" (всего {pagination.total_count})"
    )
    for column in definition.columns:
        table.add_column(column, style="cyan" if column == "id" else None)
    for record in controller.records:
        table.add_row(*(truncate_text(_cell(record.get(column)), 40) for column in definition.columns))
    return table


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


@click.command()
def resources():
    """Показать доступные справочники."""
    console = Console()
    table = Table(title="Справочники")
    table.add_column("Ресурс", style="cyan")
    table.add_column("Запись", style="green")
    table.add_column("Вложение")
    for name, definition in sorted(RESOURCE_DEFINITIONS.items()):
        table.add_row(name, definition.label, definition.asset.field if definition.asset else "")
    console.print(table)


@click.command("list")
@click.argument("resource", type=resource_choice)
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1), help="Номер страницы")
@click.option("--search", default="", help="Строка поиска")
@click.pass_obj
def list_(settings, resource, page, search):
    """
    Показать страницу записей справочника.
    """
    console = Console()

    async def _list():
        notifications = NotificationCenter.from_settings(settings)
        try:
            async with _make_client(settings, console) as client:
                controller = create_controller(client, resource, notifications)
                loaded = await controller.list(page, search)
                if loaded:
                    console.print(_records_table(controller))
                _print_notification(console, notifications)
                return loaded
        finally:
            notifications.close()

    if not asyncio.run(_list()):
        raise SystemExit(1)


@click.command()
@click.argument("resource", type=resource_choice)
@click.argument("record_id")
@click.pass_obj
def show(settings, resource, record_id):
    """
    Показать одну запись.
    """
    console = Console()

    async def _show():
        async with _make_client(settings, console) as client:
            controller = create_controller(client, resource)
            try:
                record = await controller.resource.get_by_id(record_id)
            except ApiError as e:
                console.print(f"[bold red]Ошибка API:[/] {e}")
                return False

            table = Table(title=f"{controller.label} #{record.get('id', record_id)}")
            table.add_column("Поле", style="cyan")
            table.add_column("Значение", style="green")
            for key, value in record.items():
                table.add_row(key, _cell(value))
            console.print(table)

            if controller.asset is not None:
                controller.begin_edit(record)
                if controller.asset.existing_url:
                    console.print(f"[blue]Вложение:[/] {controller.asset.existing_url}")
            return True

    if not asyncio.run(_show()):
        raise SystemExit(1)


@click.command()
@click.argument("resource", type=resource_choice)
@click.option("--id", "record_id", help="ID записи для обновления; без него создаётся новая")
@click.option("--field", "-f", "fields", multiple=True, help="Значение поля (поле=значение)")
@click.option("--file", "file_path", type=click.Path(exists=True, dir_okay=False), help="Файл вложения")
@click.option("--delete-file", is_flag=True, help="Удалить текущее вложение")
@click.pass_obj
def save(settings, resource, record_id, fields, file_path, delete_file):
    """
    Создать или обновить запись.
    """
    console = Console()

    async def _save():
        notifications = NotificationCenter.from_settings(settings)
        try:
            async with _make_client(settings, console) as client:
                controller = create_controller(client, resource, notifications)
                values = _parse_fields(controller, fields)

                if (file_path or delete_file) and controller.asset is None:
                    raise click.UsageError(f"Ресурс {resource} не поддерживает вложения")

                # Для проверки уникальности нужны записи текущей страницы
                await controller.list(1)
                if record_id is not None:
                    try:
                        record = await controller.resource.get_by_id(record_id)
                    except ApiError as e:
                        console.print(f"[bold red]Ошибка API:[/] {e}")
                        return False
                    controller.begin_edit(record)
                else:
                    controller.begin_create()

                for name, value in values.items():
                    controller.set_field(name, value)
                if delete_file:
                    controller.delete_asset()
                if file_path and not controller.select_file(UploadFile.from_path(file_path)):
                    _print_notification(console, notifications)
                    return False

                saved = await controller.submit()
                for name, message in controller.validation_errors.items():
                    console.print(f"  [red]• {name}: {message}[/]")
                _print_notification(console, notifications)
                controller.close()
                return saved
        finally:
            notifications.close()

    if not asyncio.run(_save()):
        raise SystemExit(1)


@click.command()
@click.argument("resource", type=resource_choice)
@click.argument("record_id")
@click.option("--yes", "-y", is_flag=True, help="Не спрашивать подтверждение")
@click.pass_obj
def delete(settings, resource, record_id, yes):
    """
    Удалить запись.
    """
    console = Console()

    def confirm(message: str) -> bool:
        return yes or click.confirm(message)

    async def _delete():
        notifications = NotificationCenter.from_settings(settings)
        try:
            async with _make_client(settings, console) as client:
                controller = create_controller(client, resource, notifications, confirm=confirm)
                removed = await controller.remove(_record_id(record_id))
                if not removed and notifications.current is None:
                    console.print("[yellow]Удаление отменено.[/]")
                _print_notification(console, notifications)
                return removed or notifications.current is None
        finally:
            notifications.close()

    if not asyncio.run(_delete()):
        raise SystemExit(1)


def _record_id(raw: str):
    return int(raw) if raw.isdigit() else raw

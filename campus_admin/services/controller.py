"""
Универсальный контроллер экрана администрирования.

Один класс обслуживает все справочники: поведение задаётся описанием
ресурса (ResourceDefinition), а не отдельным кодом на каждый экран.
"""

import inspect
import json
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional, Union

import aiohttp

from campus_admin.exceptions import ApiError, AssetError
from campus_admin.models import Notification, PaginationState, Record
from campus_admin.utils import extract_error_message

from .assets import AssetAction, AssetChange, AssetSlot, AssetUrlCache, UploadFile, resolve_asset_url
from .notifications import NotificationCenter


if TYPE_CHECKING:
    from .definitions import ResourceDefinition


logger = logging.getLogger("campus_admin.controller")

ConfirmCallback = Callable[[str], Union[bool, Awaitable[bool]]]


def _form_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


def build_multipart(payload: Record, change: AssetChange, asset_field: str, delete_flag: str) -> aiohttp.MultipartWriter:
    """
    Собирает multipart/form-data для ресурса с вложением.

    Списки уходят JSON-строкой, булевы как "true"/"false", None как пустая строка.
    Файл прикладывается только при замене, флаг удаления только при удалении.
    """
    writer = aiohttp.MultipartWriter("form-data")
    for name, value in payload.items():
        part = writer.append(_form_value(value))
        part.set_content_disposition("form-data", name=name)

    if change.action is AssetAction.REPLACE:
        upload = change.file
        part = writer.append(upload.content, {"Content-Type": upload.content_type})
        part.set_content_disposition("form-data", name=asset_field, filename=upload.filename)
    elif change.action is AssetAction.DELETE:
        part = writer.append("true")
        part.set_content_disposition("form-data", name=delete_flag)
    return writer


class ResourceController:
    """
    Жизненный цикл экрана: загрузка списка, пагинация, поиск,
    черновик формы, проверка, сохранение, удаление, уведомления.

    Attributes:
        resource: Ресурсная группа клиента (CrudResource)
        definition: Описание ресурса
        notifications: Общий сервис уведомлений приложения
        records: Записи текущей страницы
        pagination: Состояние пагинации
        search_term: Текущая строка поиска
        draft: Черновик формы
        editing_id: ID редактируемой записи, None при создании
        validation_errors: Ошибки проверки по полям
        saving: Идёт сохранение
        editor_open: Форма открыта
        asset: Вложение формы (только для ресурсов с файлом)
        asset_urls: Кэш ссылок на вложения по ID записи
    """

    def __init__(
        self,
        resource,
        definition: "ResourceDefinition",
        notifications: NotificationCenter,
        settings=None,
        confirm: Optional[ConfirmCallback] = None,
    ):
        self.resource = resource
        self.definition = definition
        self.schema = definition.schema
        self.notifications = notifications
        self.settings = settings if settings is not None else resource.client.settings
        self.confirm = confirm

        self.records: List[Record] = []
        self.pagination = PaginationState()
        self.search_term = ""
        self.draft: Record = self.schema.defaults()
        self.editing_id: Any = None
        self.validation_errors: Dict[str, str] = {}
        self.saving = False
        self.editor_open = False

        self.asset: Optional[AssetSlot] = None
        if definition.asset is not None:
            self.asset = AssetSlot(definition.asset, self.settings.max_upload_size)
        self.asset_urls = AssetUrlCache()

        self._issued = 0
        self._applied = 0
        self._in_flight = 0

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def notification(self) -> Optional[Notification]:
        return self.notifications.current

    @property
    def label(self) -> str:
        return self.definition.label

    async def list(self, page: int = 1, search: Optional[str] = None) -> bool:
        """
        Загружает страницу записей.

        Каждый вызов получает порядковый номер; ответ на запрос старше
        последнего применённого отбрасывается целиком, включая ошибку.

        Args:
            page: Номер страницы
            search: Строка поиска; None означает текущую

        Returns:
            bool: Ответ применён к состоянию
        """
        if search is not None:
            self.search_term = search
        self._issued += 1
        token = self._issued
        self._in_flight += 1
        try:
            result = await self.resource.get_all(
                page=page,
                limit=self.settings.page_limit,
                search=self.search_term or None,
            )
        except ApiError as e:
            if token < self._applied:
                logger.debug(f"Устаревшая ошибка списка #{token} отброшена")
                return False
            logger.error(f"Не удалось загрузить {self.definition.plural}: {e}")
            self.notifications.error(f"Failed to fetch {self.definition.plural}")
            return False
        except Exception as e:
            if token < self._applied:
                logger.debug(f"Устаревшая ошибка списка #{token} отброшена")
                return False
            logger.error(f"Неожиданная ошибка загрузки {self.definition.plural}: {e}", exc_info=True)
            self.notifications.error(f"Failed to fetch {self.definition.plural}")
            return False
        finally:
            self._in_flight -= 1

        if token < self._applied:
            logger.debug(f"Устаревший ответ списка #{token} отброшен (применён #{self._applied})")
            return False

        self._applied = token
        self.records = result.data
        self.pagination = result.pagination or PaginationState(
            current_page=page, total_pages=1, total_count=len(result.data)
        )
        logger.debug(f"Загружено {len(self.records)} записей {self.definition.name}, страница {page}")
        return True

    async def search(self, term: str) -> bool:
        return await self.list(1, term)

    async def change_page(self, page: int) -> bool:
        return await self.list(page, self.search_term)

    async def refresh(self) -> bool:
        return await self.list(self.pagination.current_page, self.search_term)

    def begin_create(self) -> None:
        self.draft = self.schema.defaults()
        self.editing_id = None
        self.validation_errors = {}
        self.notifications.dismiss()
        if self.asset is not None:
            self.asset.reset()
        self.editor_open = True

    def begin_edit(self, record: Record) -> None:
        """
        Открывает форму с копией записи.

        Для ресурса с вложением ссылка из записи превращается в полный URL
        и запоминается в кэше; запись без вложения удаляется из кэша.
        """
        self.draft = self.schema.draft_from_record(record)
        self.editing_id = record.get("id")
        self.validation_errors = {}
        self.notifications.dismiss()

        if self.asset is not None:
            self.asset.reset()
            stored = record.get(self.asset.spec.record_field)
            if stored:
                spec = self.asset.spec
                url = resolve_asset_url(spec.base_url(self.settings), str(stored), spec.url_prefix)
                self.asset.show_existing(url)
                self.asset_urls.set(self.editing_id, url)
            else:
                self.asset_urls.remove(self.editing_id)
        self.editor_open = True

    def set_field(self, name: str, value: Any) -> None:
        """
        Записывает значение в черновик и снимает ошибку этого поля.

        Raises:
            KeyError: Поле не описано для ресурса
        """
        if name not in self.schema:
            raise KeyError(f"Поле '{name}' не описано для ресурса {self.definition.name}")
        self.draft[name] = value
        self.validation_errors.pop(name, None)
        current = self.notifications.current
        if current is not None and not current.is_success:
            self.notifications.dismiss()

    def validate(self) -> bool:
        """
        Проверяет черновик. Первая ошибка показывается уведомлением.
        """
        self.validation_errors = self.schema.validate(self.draft, self.records, self.editing_id)
        if self.validation_errors:
            first = next(iter(self.validation_errors.values()))
            logger.debug(f"Черновик {self.definition.name} не прошёл проверку: {self.validation_errors}")
            self.notifications.error(first)
            return False
        return True

    async def submit(self) -> bool:
        """
        Создаёт или обновляет запись из черновика.

        Returns:
            bool: Запись сохранена
        """
        self.saving = True
        try:
            if not self.validate():
                return False

            editing = self.editing_id is not None
            body = self._build_body(editing)
            label = self.label
            try:
                if editing:
                    await self.resource.update(self.editing_id, body)
                else:
                    await self.resource.create(body)
            except ApiError as e:
                logger.error(f"Ошибка сохранения {self.definition.name}: {e}")
                self.notifications.error(extract_error_message(e, f"Failed to save {label.lower()}"))
                return False
            except Exception as e:
                logger.error(f"Непредвиденная ошибка сохранения {self.definition.name}: {e}", exc_info=True)
                self.notifications.error(f"Failed to save {label.lower()}")
                return False

            logger.info(f"{label} {'обновлена' if editing else 'создана'} (id={self.editing_id})")
            self.notifications.success(f"{label} {'updated' if editing else 'created'} successfully!")
            self._close_editor()
        finally:
            self.saving = False

        await self.refresh()
        return True

    def _build_body(self, editing: bool):
        payload = self.schema.build_payload(self.draft)
        if self.asset is None:
            return payload
        spec = self.asset.spec
        return build_multipart(payload, self.asset.change(editing), spec.field, spec.delete_flag)

    async def remove(self, record_id: Any) -> bool:
        """
        Удаляет запись после подтверждения и перезагружает текущую страницу.

        Returns:
            bool: Запись удалена
        """
        label = self.label.lower()
        if not await self._confirm(f"Are you sure you want to delete this {label}?"):
            logger.debug(f"Удаление {self.definition.name} {record_id} отменено")
            return False

        try:
            await self.resource.delete(record_id)
        except ApiError as e:
            logger.error(f"Ошибка удаления {self.definition.name} {record_id}: {e}")
            self.notifications.error(extract_error_message(e, f"Failed to delete {label}"))
            return False
        except Exception as e:
            logger.error(f"Непредвиденная ошибка удаления {self.definition.name} {record_id}: {e}", exc_info=True)
            self.notifications.error(f"Failed to delete {label}")
            return False

        self.asset_urls.remove(record_id)
        self.notifications.success(f"{self.label} deleted successfully!")
        await self.refresh()
        return True

    async def _confirm(self, message: str) -> bool:
        # Без обработчика подтверждения удаление не спрашивается
        if self.confirm is None:
            return True
        answer = self.confirm(message)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    def cancel(self) -> None:
        self._close_editor()
        self.notifications.dismiss()
        self.asset_urls.clear()

    def select_file(self, upload: UploadFile) -> bool:
        """
        Принимает файл для вложения. Отклонённый файл не меняет форму.

        Returns:
            bool: Файл принят
        """
        if self.asset is None:
            raise TypeError(f"Ресурс {self.definition.name} не поддерживает вложения")
        try:
            self.asset.select(upload)
        except AssetError as e:
            logger.warning(f"Файл {upload.filename} отклонён: {e.message}")
            self.notifications.error(e.message)
            return False
        return True

    def delete_asset(self) -> None:
        if self.asset is None:
            raise TypeError(f"Ресурс {self.definition.name} не поддерживает вложения")
        self.asset.delete()
        if self.editing_id is not None:
            self.asset_urls.remove(self.editing_id)

    def close(self) -> None:
        if self.asset is not None:
            self.asset.close()

    def _close_editor(self) -> None:
        self.editor_open = False
        self.draft = self.schema.defaults()
        self.editing_id = None
        self.validation_errors = {}
        if self.asset is not None:
            self.asset.reset()

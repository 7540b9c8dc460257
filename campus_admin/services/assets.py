"""
Вложения записей: выбор файла, превью, ссылка на уже загруженный файл на сервере.
"""

import asyncio
import base64
import logging
import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from campus_admin.exceptions import AssetError


logger = logging.getLogger("campus_admin.assets")

IMAGE_TYPES: Tuple[str, ...] = ("image/",)
DOCUMENT_TYPES: Tuple[str, ...] = (
    "image/",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


class UploadFile(BaseModel):
    """
    Файл, выбранный пользователем для загрузки.

    Attributes:
        filename: Имя файла
        content: Содержимое
        content_type: MIME-тип
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "UploadFile":
        """
        Читает файл с диска, MIME-тип определяется по расширению.
        """
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )


class AssetAction(str, Enum):
    KEEP = "keep"
    REPLACE = "replace"
    DELETE = "delete"


@dataclass(frozen=True)
class AssetChange:
    """
    Что сделать с вложением при сохранении: оставить, заменить файлом или удалить.
    """

    action: AssetAction
    file: Optional[UploadFile] = None

    @classmethod
    def keep(cls) -> "AssetChange":
        return cls(AssetAction.KEEP)

    @classmethod
    def replace(cls, file: UploadFile) -> "AssetChange":
        return cls(AssetAction.REPLACE, file)

    @classmethod
    def delete(cls) -> "AssetChange":
        return cls(AssetAction.DELETE)


@dataclass
class AssetSpec:
    """
    Описание вложения ресурса.

    Attributes:
        field: Имя multipart-поля с файлом
        record_field: Поле записи, где сервер хранит ссылку на файл
        delete_flag: Multipart-поле, которым просим сервер удалить файл
        url_prefix: Каталог на сервере для голых имён файлов
        mount: Путь относительно URL API, от которого строится ссылка;
               None означает корень сервера
        accept: Допустимые MIME-типы (префиксы вида "image/" или точные типы)
        image_only: Принимаются только изображения
    """

    field: str
    record_field: str
    delete_flag: str
    url_prefix: str
    mount: Optional[str] = None
    accept: Tuple[str, ...] = DOCUMENT_TYPES
    image_only: bool = False

    def accepts(self, content_type: str) -> bool:
        return any(
            content_type.startswith(allowed) if allowed.endswith("/") else content_type == allowed
            for allowed in self.accept
        )

    def base_url(self, settings) -> str:
        if self.mount is None:
            return settings.static_base_url
        return f"{settings.api_url.rstrip('/')}/{self.mount.strip('/')}"


def resolve_asset_url(base: str, stored: str, fallback_prefix: str) -> str:
    """
    Превращает сохранённую сервером ссылку в загружаемый URL.

    Args:
        base: Базовый URL (корень сервера или раздел API)
        stored: Значение из записи: абсолютный URL, путь от корня или имя файла
        fallback_prefix: Каталог для голого имени файла

    Returns:
        str: Полный URL файла
    """
    if stored.startswith(("http://", "https://")):
        return stored
    base = base.rstrip("/")
    if stored.startswith("/"):
        return f"{base}{stored}"
    return f"{base}/{fallback_prefix.strip('/')}/{stored}"


def build_preview(upload: UploadFile) -> str:
    """Data URL для превью выбранного файла."""
    encoded = base64.b64encode(upload.content).decode("ascii")
    return f"data:{upload.content_type};base64,{encoded}"


class AssetUrlCache:
    """
    Кэш разрешённых ссылок на вложения по ID записи.

    Не ограничен по размеру, записи удаляются только явно.
    """

    def __init__(self):
        self._urls: Dict[Any, str] = {}

    def get(self, record_id: Any) -> Optional[str]:
        return self._urls.get(record_id)

    def set(self, record_id: Any, url: str) -> None:
        self._urls[record_id] = url

    def remove(self, record_id: Any) -> None:
        self._urls.pop(record_id, None)

    def clear(self) -> None:
        self._urls.clear()

    def __len__(self) -> int:
        return len(self._urls)

    def __contains__(self, record_id: Any) -> bool:
        return record_id in self._urls


class AssetSlot:
    """
    Вложение в открытой форме.

    Одновременно активно только одно из трёх: новый файл, ссылка на файл
    на сервере, ничего. Превью строится в отдельном потоке; результат,
    пришедший после смены файла, отбрасывается по номеру поколения.
    """

    def __init__(self, spec: AssetSpec, max_size: int):
        self.spec = spec
        self.max_size = max_size
        self.file: Optional[UploadFile] = None
        self.preview: Optional[str] = None
        self.existing_url: Optional[str] = None
        self.deleted = False
        self._generation = 0
        self._preview_task: Optional[asyncio.Task] = None

    @property
    def generation(self) -> int:
        return self._generation

    def check(self, upload: UploadFile) -> None:
        """
        Raises:
            AssetError: Неподходящий тип файла или превышен размер
        """
        if not self.spec.accepts(upload.content_type):
            message = "Please select an image file" if self.spec.image_only else "Unsupported file type"
            raise AssetError(message, {"content_type": upload.content_type})
        if upload.size > self.max_size:
            limit_mb = self.max_size // (1024 * 1024)
            raise AssetError(f"File size must be less than {limit_mb}MB", {"size": upload.size})

    def select(self, upload: UploadFile) -> Optional[asyncio.Task]:
        """
        Принимает новый файл и запускает построение превью.

        Returns:
            Optional[asyncio.Task]: Задача построения превью, если есть активный цикл событий

        Raises:
            AssetError: Файл отклонён, состояние слота не меняется
        """
        self.check(upload)
        self._advance()
        self.file = upload
        self.existing_url = None
        self.deleted = False

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Нет активного цикла событий, превью строится синхронно")
            self.preview = build_preview(upload)
            return None

        self._preview_task = asyncio.create_task(self._load_preview(self._generation, upload))
        return self._preview_task

    async def _load_preview(self, generation: int, upload: UploadFile) -> None:
        preview = await asyncio.to_thread(build_preview, upload)
        if generation != self._generation:
            logger.debug(f"Превью для {upload.filename} устарело, отбрасываем")
            return
        self.preview = preview

    def show_existing(self, url: str) -> None:
        self._advance()
        self.file = None
        self.preview = None
        self.existing_url = url
        self.deleted = False

    def delete(self) -> None:
        self._advance()
        self.file = None
        self.preview = None
        self.existing_url = None
        self.deleted = True

    def reset(self) -> None:
        self._advance()
        self.file = None
        self.preview = None
        self.existing_url = None
        self.deleted = False

    def change(self, editing: bool) -> AssetChange:
        """
        Изменение вложения для отправки.

        Удаление имеет смысл только для существующей записи.
        """
        if self.file is not None:
            return AssetChange.replace(self.file)
        if self.deleted and editing:
            return AssetChange.delete()
        return AssetChange.keep()

    def close(self) -> None:
        self._advance()

    def _advance(self) -> None:
        self._generation += 1
        if self._preview_task is not None and not self._preview_task.done():
            self._preview_task.cancel()
        self._preview_task = None

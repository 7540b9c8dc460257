"""
Модели данных для работы с API учебного заведения.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


Record = Dict[str, Any]


class PaginationState(BaseModel):
    """
    Состояние пагинации списка.

    Attributes:
        current_page: Текущая страница (с 1)
        total_pages: Всего страниц
        total_count: Всего записей
        has_next: Есть ли следующая страница
        has_prev: Есть ли предыдущая страница
    """

    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(1, alias="currentPage", ge=1)
    total_pages: int = Field(1, alias="totalPages", ge=0)
    total_count: int = Field(
        0,
        validation_alias=AliasChoices("totalCount", "totalItems", "total_count"),
        serialization_alias="totalCount",
    )
    has_next: bool = Field(False, alias="hasNext")
    has_prev: bool = Field(False, alias="hasPrev")

    @model_validator(mode="after")
    def _derive_flags(self) -> "PaginationState":
        # Флаги всегда выводятся из номеров страниц, значения сервера не используются
        self.has_next = self.current_page < self.total_pages
        self.has_prev = self.current_page > 1
        return self


class ListPage(BaseModel):
    """
    Ответ списочного эндпоинта: `{data: [...], pagination: {...}}`.
    """

    data: List[Record] = Field(default_factory=list)
    pagination: Optional[PaginationState] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_plain_list(cls, value: Any) -> Any:
        # Часть эндпоинтов (например, /all) возвращает просто массив
        if isinstance(value, list):
            return {"data": value}
        return value


class FieldError(BaseModel):
    """Элемент массива `errors` в ответе сервера."""

    model_config = ConfigDict(extra="allow")

    msg: str = ""
    param: Optional[str] = None


class ErrorBody(BaseModel):
    """
    Тело ответа с ошибкой: `{message}` и/или `{errors: [{msg}]}`.
    """

    model_config = ConfigDict(extra="allow")

    message: Optional[str] = None
    errors: List[FieldError] = Field(default_factory=list)


class NotificationKind(str, Enum):
    """Вид уведомления."""

    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    """
    Уведомление для пользователя. Одновременно активно не более одного.
    """

    model_config = ConfigDict(frozen=True)

    kind: NotificationKind
    text: str

    @property
    def is_success(self) -> bool:
        return self.kind is NotificationKind.SUCCESS

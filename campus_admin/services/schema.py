"""
Схема полей формы: значения по умолчанию, правила проверки и сборка тела запроса.

Правила задаются для каждого ресурса отдельно данными (см. definitions.py),
общий код здесь только их исполняет.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from campus_admin.models import Record
from campus_admin.utils import split_list, to_int


EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")
PHONE_STRIP_RE = re.compile(r"[\s\-()]")


class FieldKind(str, Enum):
    """Тип поля формы."""

    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    LIST = "list"
    EMAIL = "email"
    PHONE = "phone"


# Шаблоны сообщений. {label}, {n}, {other} подставляются из FieldSpec.
DEFAULT_MESSAGES = {
    "required": "{label} is required",
    "min_length": "{label} must be at least {n} characters long",
    "max_length": "{label} must not exceed {n} characters",
    "min_value": "{label} must be at least {n}",
    "max_value": "{label} must not exceed {n}",
    "negative": "{label} cannot be negative",
    "number": "{label} must be a whole number",
    "email": "Please enter a valid email address",
    "phone": "Please enter a valid phone number",
    "unique": "This {label_lower} is already in use",
    "order": "{label} must be greater than or equal to {other}",
}


@dataclass
class FieldSpec:
    """
    Описание одного поля формы.

    Attributes:
        name: Имя поля в записи и в теле запроса
        label: Человекочитаемое имя для сообщений
        kind: Тип поля
        required: Поле обязательно
        default: Значение в черновике при создании
        min_length: Минимальная длина текста после trim
        max_length: Максимальная длина текста после trim
        min_value: Нижняя граница числа
        max_value: Верхняя граница числа
        gte_field: Имя парного поля-минимума; значение должно быть >= него
        unique: Значение уникально (без учёта регистра) среди загруженных записей
        nullable: Пустое значение отправляется как null, а не ""
        messages: Переопределение шаблонов сообщений по ключу правила
    """

    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    default: Any = ""
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    gte_field: Optional[str] = None
    unique: bool = False
    nullable: bool = False
    messages: Dict[str, str] = field(default_factory=dict)

    def message(self, rule: str, **params: Any) -> str:
        template = self.messages.get(rule, DEFAULT_MESSAGES[rule])
        return template.format(label=self.label, label_lower=self.label.lower(), **params)


def _is_blank(value: Any, kind: FieldKind) -> bool:
    if value is None:
        return True
    if kind is FieldKind.LIST:
        return not split_list(value)
    if isinstance(value, bool):
        return False
    return not str(value).strip()


class ResourceSchema:
    """
    Набор полей ресурса в порядке объявления.

    Порядок важен: ошибки накапливаются в нём же, и первая из них
    показывается во всплывающем уведомлении.
    """

    def __init__(self, fields: Iterable[FieldSpec]):
        self.fields: List[FieldSpec] = list(fields)
        self._by_name = {spec.name: spec for spec in self.fields}

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __getitem__(self, name: str) -> FieldSpec:
        return self._by_name[name]

    def defaults(self) -> Record:
        """Черновик с значениями по умолчанию для всех полей."""
        return {spec.name: spec.default for spec in self.fields}

    def draft_from_record(self, record: Record) -> Record:
        """
        Копирует редактируемые поля записи в черновик.

        Отсутствующие и null значения становятся "", списки собираются через ", ".
        """
        draft: Record = {}
        for spec in self.fields:
            value = record.get(spec.name)
            if value is None:
                draft[spec.name] = False if spec.kind is FieldKind.BOOLEAN else ""
            elif spec.kind is FieldKind.LIST and isinstance(value, (list, tuple)):
                draft[spec.name] = ", ".join(str(item) for item in value)
            else:
                draft[spec.name] = value
        return draft

    def validate(
        self,
        draft: Record,
        records: Optional[List[Record]] = None,
        editing_id: Any = None,
    ) -> Dict[str, str]:
        """
        Проверяет черновик целиком, не останавливаясь на первой ошибке.

        Args:
            draft: Черновик формы
            records: Уже загруженные записи (для проверки уникальности)
            editing_id: ID редактируемой записи, она исключается из проверки уникальности

        Returns:
            Dict[str, str]: Ошибки по полям в порядке объявления полей
        """
        errors: Dict[str, str] = {}
        numbers: Dict[str, Optional[int]] = {}

        for spec in self.fields:
            value = draft.get(spec.name)

            if spec.kind is FieldKind.BOOLEAN:
                continue

            if _is_blank(value, spec.kind):
                if spec.required:
                    errors[spec.name] = spec.message("required")
                numbers[spec.name] = None
                continue

            if spec.kind is FieldKind.INTEGER:
                error = self._check_integer(spec, value, numbers)
            elif spec.kind is FieldKind.LIST:
                error = None
            else:
                error = self._check_text(spec, str(value).strip(), records or [], editing_id)
            if error:
                errors[spec.name] = error

            # Парное правило перекрывает собственную ошибку поля
            if spec.gte_field is not None:
                low, high = numbers.get(spec.gte_field), numbers.get(spec.name)
                if low is not None and high is not None and low > high:
                    other = self._by_name[spec.gte_field].label.lower()
                    errors[spec.name] = spec.message("order", other=other)

        return errors

    def _check_integer(self, spec: FieldSpec, value: Any, numbers: Dict[str, Optional[int]]) -> Optional[str]:
        try:
            number = to_int(value)
        except ValueError:
            numbers[spec.name] = None
            return spec.message("number")
        numbers[spec.name] = number

        if spec.min_value is not None and number < spec.min_value:
            return spec.message("negative" if spec.min_value == 0 else "min_value", n=spec.min_value)
        if spec.max_value is not None and number > spec.max_value:
            return spec.message("max_value", n=spec.max_value)
        return None

    def _check_text(self, spec: FieldSpec, text: str, records: List[Record], editing_id: Any) -> Optional[str]:
        if spec.min_length is not None and len(text) < spec.min_length:
            return spec.message("min_length", n=spec.min_length)
        if spec.max_length is not None and len(text) > spec.max_length:
            return spec.message("max_length", n=spec.max_length)
        if spec.kind is FieldKind.EMAIL and not EMAIL_RE.match(text):
            return spec.message("email")
        if spec.kind is FieldKind.PHONE and not PHONE_RE.match(PHONE_STRIP_RE.sub("", text)):
            return spec.message("phone")
        if spec.unique:
            lowered = text.lower()
            for record in records:
                if editing_id is not None and record.get("id") == editing_id:
                    continue
                if str(record.get(spec.name) or "").strip().lower() == lowered:
                    return spec.message("unique")
        return None

    def build_payload(self, draft: Record) -> Record:
        """
        Собирает тело запроса из черновика.

        Числа разбираются в int (пустые становятся None), списки через запятую
        разбиваются и очищаются, булевы передаются как есть, текст обрезается.
        """
        payload: Record = {}
        for spec in self.fields:
            value = draft.get(spec.name)
            if spec.kind is FieldKind.BOOLEAN:
                payload[spec.name] = bool(value)
            elif spec.kind is FieldKind.INTEGER:
                payload[spec.name] = to_int(value)
            elif spec.kind is FieldKind.LIST:
                payload[spec.name] = split_list(value)
            else:
                text = "" if value is None else str(value).strip()
                payload[spec.name] = None if (spec.nullable and not text) else text
        return payload

"""
Вспомогательные функции для работы с API учебного заведения.
"""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

import aiohttp
from pydantic import ValidationError

from campus_admin.exceptions import CampusAdminAPIError
from campus_admin.models import ErrorBody


logger = logging.getLogger("campus_admin.utils")


class CustomJSONEncoder(json.JSONEncoder):
    """
    Кастомный JSON-энкодер для сериализации UUID, дат и Decimal.
    """

    def default(self, obj):
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return float(obj)
        return super().default(obj)


async def parse_error_response(response: aiohttp.ClientResponse) -> Dict[str, Any]:
    """
    Парсит ответ с ошибкой от API и возвращает информацию об ошибке.

    Args:
        response: Объект ответа aiohttp

    Returns:
        Dict[str, Any]: Словарь с информацией об ошибке
    """
    status_code = response.status

    try:
        response_text = await response.text()
        message = response_text
        response_data = None

        # Пытаемся распарсить JSON из тела ответа
        try:
            response_data = json.loads(response_text)
            if isinstance(response_data, dict):
                if response_data.get("message"):
                    message = response_data["message"]
                elif response_data.get("error"):
                    message = response_data["error"]
        except json.JSONDecodeError:
            pass

        return {"status_code": status_code, "message": message, "data": response_data}
    except aiohttp.ClientError as e:
        logger.error(f"Ошибка при чтении ответа с ошибкой: {e!s}")
        return {
            "status_code": status_code,
            "message": f"Ошибка при чтении ответа: {e!s}",
            "data": None,
        }


def extract_error_message(error: BaseException, fallback: str) -> str:
    """
    Формирует сообщение для пользователя из ошибки API.

    Приоритет: массив `errors[].msg` из тела ответа, затем поле `message`,
    иначе `fallback`. Сырые исключения пользователю не показываются.

    Args:
        error: Перехваченное исключение
        fallback: Сообщение по умолчанию

    Returns:
        str: Текст уведомления
    """
    if not isinstance(error, CampusAdminAPIError) or not isinstance(error.response_data, dict):
        return fallback

    try:
        body = ErrorBody.model_validate(error.response_data)
    except ValidationError:
        logger.debug(f"Тело ошибки не распознано: {error.response_data!r}")
        return fallback

    messages = [item.msg for item in body.errors if item.msg]
    if messages:
        return f"Validation errors: {', '.join(messages)}"
    if body.message:
        return body.message
    return fallback


def to_int(value: Any) -> Optional[int]:
    """
    Приводит значение поля формы к целому числу.

    Returns:
        Optional[int]: Число, либо None для пустой строки или None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    return int(text)


def split_list(value: Any) -> list:
    """
    Разбивает строку через запятую на элементы, убирая пробелы и пустые значения.
    """
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = str(value or "").split(",")
    return [str(item).strip() for item in items if str(item).strip()]


def truncate_text(text: str, max_length: int) -> str:
    """Обрезает текст для вывода в таблице."""
    return text[:max_length] + "..." if len(text) > max_length else text

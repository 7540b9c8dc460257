"""
Модуль с пользовательскими исключениями для API учебного заведения.
"""

from typing import Any


class ApiError(Exception):
    """
    Базовый класс для всех исключений клиента.
    """

    def __init__(self, message: str, details: Any = None):
        """
        Инициализирует исключение.

        Args:
            message: Сообщение об ошибке
            details: Дополнительные детали ошибки
        """
        self.message = message
        self.details = details
        super().__init__(message)


class CampusAdminAPIError(ApiError):
    """Ошибка при вызове API (любой ответ со статусом >= 400)."""

    def __init__(self, status_code: int, message: str, response_data: Any = None):
        self.status_code = status_code
        self.response_data = response_data
        super().__init__(message, response_data)

    def __str__(self) -> str:
        return f"Ошибка API [{self.status_code}]: {self.message}"


class CampusAdminAuthError(CampusAdminAPIError):
    """Сессия недействительна (401). Токен уже очищен клиентом."""

    def __init__(self, message: str = "Unauthorized", response_data: Any = None):
        super().__init__(401, message, response_data)


class CampusAdminConnectionError(ApiError):
    """Ошибка соединения с сервером API."""

    pass


class CampusAdminTimeoutError(ApiError):
    """Ошибка таймаута при запросе к API."""

    pass


class AssetError(ApiError):
    """
    Файл отклонён до загрузки: неподходящий тип или превышен размер.
    """

    pass

"""
Основные компоненты для работы с REST API учебного заведения.
Этот пакет содержит core-функциональность: HTTP-клиент, ресурсы и хранилища токена.
"""

from ..exceptions import (
    ApiError,
    CampusAdminAPIError,
    CampusAdminAuthError,
    CampusAdminConnectionError,
    CampusAdminTimeoutError,
)
from .client import CampusAdminClient
from .session import FileTokenStore, MemoryTokenStore


__all__ = [
    "ApiError",
    "CampusAdminAPIError",
    "CampusAdminAuthError",
    "CampusAdminClient",
    "CampusAdminConnectionError",
    "CampusAdminTimeoutError",
    "FileTokenStore",
    "MemoryTokenStore",
]

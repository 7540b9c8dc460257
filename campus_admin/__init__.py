"""
Пакет для администрирования справочников учебного заведения через REST API.
"""

from . import models
from .cli import cli
from .config import CampusAdminConfig
from .core import (
    ApiError,
    CampusAdminAPIError,
    CampusAdminAuthError,
    CampusAdminClient,
    CampusAdminConnectionError,
    CampusAdminTimeoutError,
    FileTokenStore,
    MemoryTokenStore,
)
from .services import NotificationCenter, ResourceController, UploadFile, create_controller


__all__ = [
    "ApiError",
    "CampusAdminAPIError",
    "CampusAdminAuthError",
    "CampusAdminClient",
    "CampusAdminConfig",
    "CampusAdminConnectionError",
    "CampusAdminTimeoutError",
    "FileTokenStore",
    "MemoryTokenStore",
    "NotificationCenter",
    "ResourceController",
    "UploadFile",
    "create_controller",
    "models",
    "cli",
]

__version__ = "0.1.0"

"""
Сервисный слой: контроллеры экранов, схемы полей, вложения и уведомления.
"""

from .assets import AssetAction, AssetChange, AssetSlot, AssetSpec, AssetUrlCache, UploadFile, resolve_asset_url
from .controller import ResourceController, build_multipart
from .definitions import RESOURCE_DEFINITIONS, ResourceDefinition, create_controller, get_definition
from .notifications import NotificationCenter
from .schema import FieldKind, FieldSpec, ResourceSchema


__all__ = [
    "RESOURCE_DEFINITIONS",
    "AssetAction",
    "AssetChange",
    "AssetSlot",
    "AssetSpec",
    "AssetUrlCache",
    "FieldKind",
    "FieldSpec",
    "NotificationCenter",
    "ResourceController",
    "ResourceDefinition",
    "ResourceSchema",
    "UploadFile",
    "build_multipart",
    "create_controller",
    "get_definition",
    "resolve_asset_url",
]

"""
NOC Registry - services
app/services/__init__.py
"""

from app.services.noc_registration import (
    NocRegistrationService,
    PhotoUpload,
    RegistrationError,
    RegistrationStage,
    complete_registration_in_background
)
from app.services.noc_store import NocRecordStore, DuplicateNocNumberError, NocNotFoundError
from app.services.storage import AssetStore, LocalAssetStore, S3AssetStore, get_asset_store

__all__ = [
    "NocRegistrationService",
    "PhotoUpload",
    "RegistrationError",
    "RegistrationStage",
    "complete_registration_in_background",
    "NocRecordStore",
    "DuplicateNocNumberError",
    "NocNotFoundError",
    "AssetStore",
    "LocalAssetStore",
    "S3AssetStore",
    "get_asset_store",
]

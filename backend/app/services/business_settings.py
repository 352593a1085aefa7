"""Per-owner business settings: defaults, edits, and JSON import/export."""

import json
import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session

from backend.app.core.errors import BillingValidationError, SettingsImportError
from backend.app.core.settings import get_settings
from backend.app.models.business_settings import BusinessSettings
from backend.app.schemas.business_settings import BusinessSettingsUpdate, SettingsFile
from backend.app.services.billing import normalize_rate

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("rate_per_minute", "business_name", "business_contact", "business_address")


def default_business_settings() -> dict:
    """Defaults applied to a tenant the first time its settings are read."""
    config = get_settings()
    return {
        "rate_per_minute": config.default_rate_per_minute,
        "business_name": config.default_business_name,
        "business_contact": config.default_business_contact,
        "business_address": config.default_business_address,
    }


def get_or_create_business_settings(db: Session, owner_id: int) -> BusinessSettings:
    settings = db.query(BusinessSettings).filter(BusinessSettings.owner_id == owner_id).first()
    if settings:
        return settings
    settings = BusinessSettings(owner_id=owner_id, **default_business_settings())
    db.add(settings)
    db.commit()
    db.refresh(settings)
    return settings


def _apply_changes(settings: BusinessSettings, changes: dict) -> None:
    if changes.get("rate_per_minute") is not None:
        changes["rate_per_minute"] = normalize_rate(changes["rate_per_minute"])
    for field in EDITABLE_FIELDS:
        value = changes.get(field)
        if value is not None:
            setattr(settings, field, value)


def update_business_settings(db: Session, owner_id: int, payload: BusinessSettingsUpdate) -> BusinessSettings:
    """Apply a partial update; raises BillingValidationError for a non-positive rate."""
    settings = get_or_create_business_settings(db, owner_id)
    _apply_changes(settings, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(settings)
    return settings


def export_settings_document(settings: BusinessSettings) -> dict:
    return {
        "ratePerMinute": float(settings.rate_per_minute),
        "businessName": settings.business_name,
        "businessContact": settings.business_contact,
        "businessAddress": settings.business_address,
    }


def parse_settings_document(raw: bytes | str) -> dict:
    """Validate an uploaded settings file and return only the keys it sets.

    Raises SettingsImportError when the file is not a JSON object or a value
    has the wrong type; nothing is applied in that case.
    """
    try:
        document = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise SettingsImportError("Invalid settings file.") from exc
    if not isinstance(document, dict):
        raise SettingsImportError("Invalid settings file.")
    try:
        parsed = SettingsFile.model_validate(document)
    except ValidationError as exc:
        raise SettingsImportError("Invalid settings file.") from exc

    changes = parsed.model_dump(exclude_none=True)
    if "rate_per_minute" in changes:
        try:
            changes["rate_per_minute"] = normalize_rate(changes["rate_per_minute"])
        except BillingValidationError as exc:
            raise SettingsImportError(f"Invalid settings file: {exc}") from exc
    return changes


def import_settings_document(db: Session, owner_id: int, raw: bytes | str) -> BusinessSettings:
    """Shallow-merge a settings file onto the owner's current settings."""
    changes = parse_settings_document(raw)
    settings = get_or_create_business_settings(db, owner_id)
    _apply_changes(settings, changes)
    db.commit()
    db.refresh(settings)
    logger.info("Imported settings for owner %s: %s", owner_id, sorted(changes))
    return settings

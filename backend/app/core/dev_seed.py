import logging
import os

from sqlalchemy.orm import Session

from backend.app.core.security import get_password_hash
from backend.app.models.user import User
from backend.app.services.business_settings import get_or_create_business_settings

logger = logging.getLogger(__name__)

DEFAULT_DEV_EMAIL = "owner@example.com"
DEFAULT_DEV_PASSWORD = "Secret123!"


def ensure_default_dev_owner(db: Session) -> User | None:
    """
    Create a default owner with default business settings for local development.
    Skips execution when running under pytest or outside the development environment.
    """
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    if os.getenv("AQUABILL_ENV", "development") != "development":
        return None

    user = db.query(User).filter(User.email == DEFAULT_DEV_EMAIL).first()
    if user:
        return user

    user = User(email=DEFAULT_DEV_EMAIL, hashed_password=get_password_hash(DEFAULT_DEV_PASSWORD), is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    get_or_create_business_settings(db, user.id)
    logger.info("Seeded development owner %s", DEFAULT_DEV_EMAIL)
    return user

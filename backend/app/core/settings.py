import os
from decimal import Decimal


DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"


class Settings:
    def __init__(self):
        self.app_name = "AquaBill"
        self.api_version = "1.0.0"
        self.environment = os.getenv("AQUABILL_ENV", "development")
        self.secret_key = os.getenv("AQUABILL_SECRET_KEY", "CHANGE_ME")
        self.access_token_expire_minutes = int(os.getenv("AQUABILL_TOKEN_EXPIRE_MINUTES", "60"))
        self.database_url = os.getenv("AQUABILL_DATABASE_URL", "sqlite:///./aquabill.db")
        self.log_level = os.getenv("AQUABILL_LOG_LEVEL", "INFO").upper()
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("AQUABILL_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
            if origin.strip()
        ]
        self.currency = os.getenv("AQUABILL_CURRENCY", "PKR")

        # Business settings applied to a tenant the first time its settings are read
        self.default_rate_per_minute = Decimal(os.getenv("AQUABILL_DEFAULT_RATE", "16.666"))
        self.default_business_name = "Tubewell Water Supply"
        self.default_business_contact = "0300-0000000"
        self.default_business_address = "Your Area, Your City"


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance

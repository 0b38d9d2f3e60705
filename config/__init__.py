import os
from typing import Optional

SETTINGS_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "testing": "config.testing",
    "test": "config.testing",
    "production": "config.production",
    "prod": "config.production",
}


def get_settings_module(env: Optional[str] = None) -> str:
    """Resolve an environment name (or APP_ENV) to the settings module to import.

    Unknown names fall back to development so a typo never boots production.
    """
    name = (env or os.getenv("APP_ENV") or "development").strip().lower()
    return SETTINGS_MODULES.get(name, "config.development")

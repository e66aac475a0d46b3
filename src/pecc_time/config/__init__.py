import importlib
import os
from types import ModuleType


def get_settings_module() -> str:
    # APP_ENV selects the settings module, defaulting to development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "pecc_time.config.production"

    if env in {"test", "testing"}:
        return "pecc_time.config.testing"

    return "pecc_time.config.development"


def load_settings() -> ModuleType:
    return importlib.import_module(get_settings_module())

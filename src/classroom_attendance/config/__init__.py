import importlib
import os

from dotenv import load_dotenv


def get_settings_module() -> str:
    # APP_ENV selects the settings module, 'development' by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "classroom_attendance.config.production"

    if env in {"test", "testing"}:
        return "classroom_attendance.config.testing"

    return "classroom_attendance.config.development"


def load_settings():
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())

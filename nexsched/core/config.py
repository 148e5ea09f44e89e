import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: str = "") -> list[str]:
    raw = default if value is None else value
    return [item.strip() for item in raw.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./nexsched.db")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), default="http://localhost:4200")

CLINIC_TIMEZONE = os.getenv("CLINIC_TIMEZONE", "Asia/Manila")
CLINIC_SLOT_DURATION_MINUTES = os.getenv("CLINIC_SLOT_DURATION_MINUTES", "30")
CLINIC_HOLIDAYS = _get_list(os.getenv("CLINIC_HOLIDAYS"), default="2024-12-25,2025-01-01")
# JSON list of {"day_of_week", "is_open", "start", "end"}; unset means the default clinic week.
CLINIC_WORKING_HOURS = os.getenv("CLINIC_WORKING_HOURS")

SEED_REFERENCE_DATA = _get_bool(os.getenv("SEED_REFERENCE_DATA"), default=True)


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and DATABASE_URL.startswith("sqlite"):
        raise RuntimeError("DATABASE_URL must point at a server database in production.")

import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_set(value: str | None, default: str) -> frozenset[int]:
    raw = value if value is not None else default
    return frozenset(int(part) for part in raw.split(",") if part.strip())


APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./scheduler.db")
DB_ECHO = _get_bool(os.getenv("DB_ECHO"), default=False)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

ALLOWED_SLOT_DURATIONS = _get_int_set(os.getenv("ALLOWED_SLOT_DURATIONS"), "15,30,45,60")

# Attempts, not retries: 3 means the first try plus two retries.
BOOKING_MAX_ATTEMPTS = max(2, int(os.getenv("BOOKING_MAX_ATTEMPTS", "3")))

ENFORCE_MAX_APPOINTMENTS_PER_DAY = _get_bool(os.getenv("ENFORCE_MAX_APPOINTMENTS_PER_DAY"), default=False)

MAX_TEXT_LENGTH = int(os.getenv("MAX_TEXT_LENGTH", "1000"))


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if not ALLOWED_SLOT_DURATIONS or min(ALLOWED_SLOT_DURATIONS) <= 0:
        raise RuntimeError("ALLOWED_SLOT_DURATIONS must list positive minute values.")

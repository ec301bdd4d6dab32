from pathlib import Path
from dotenv import load_dotenv
import os

BASE_DIR = Path(__file__).resolve().parents[2]
load_dotenv(BASE_DIR / '.env')


def _as_bool(value: str, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _as_list(value: str) -> list:
    return [item.strip() for item in (value or '').split(',') if item.strip()]


def _as_optional_float(value: str):
    if value is None or not value.strip():
        return None
    return float(value)


class Settings:
    GOOGLE_CLIENT_ID: str = os.getenv('GOOGLE_CLIENT_ID')
    GOOGLE_CLIENT_SECRET: str = os.getenv('GOOGLE_CLIENT_SECRET')
    BACKEND_HOST: str = os.getenv('BACKEND_HOST', '0.0.0.0')
    BACKEND_PORT: int = int(os.getenv('BACKEND_PORT', '8000'))
    RELOAD: bool = _as_bool(os.getenv('RELOAD', 'false'), default=False)
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Relay
    CORS_ORIGINS: list = _as_list(os.getenv('CORS_ORIGINS', 'http://localhost:5173'))

    # Desktop client
    RELAY_URL: str = os.getenv('RELAY_URL', 'http://localhost:8000')
    SESSION_STORE_PATH: Path = Path(os.getenv('SESSION_STORE_PATH') or (BASE_DIR / 'tokens' / 'session.json'))
    SESSION_VALIDATOR: str = os.getenv('SESSION_VALIDATOR', 'tokeninfo').strip().lower()
    REQUEST_TIMEOUT_SECONDS = _as_optional_float(os.getenv('REQUEST_TIMEOUT_SECONDS'))


settings = Settings()

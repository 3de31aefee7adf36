from pathlib import Path
from dotenv import load_dotenv
import os

BASE_DIR = Path(__file__).resolve().parents[2]
load_dotenv(BASE_DIR / '.env')


def _as_bool(value: str, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _first_env(*names: str, default: str = None) -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


class Settings:
    # CLIENT_ID_ENV / CLIENT_SECRET_ENV are accepted for older .env files
    GOOGLE_CLIENT_ID: str = _first_env('GOOGLE_CLIENT_ID', 'CLIENT_ID_ENV')
    GOOGLE_CLIENT_SECRET: str = _first_env('GOOGLE_CLIENT_SECRET', 'CLIENT_SECRET_ENV')
    GOOGLE_OAUTH_REDIRECT_URI: str = os.getenv('GOOGLE_OAUTH_REDIRECT_URI', 'http://localhost:3000/oauth2callback')
    BACKEND_HOST: str = os.getenv('BACKEND_HOST', '0.0.0.0')
    BACKEND_PORT: int = int(os.getenv('BACKEND_PORT', '3000'))
    RELOAD: bool = _as_bool(os.getenv('RELOAD', 'false'), default=False)
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO').upper()
    STATIC_DIR: Path = Path(os.getenv('STATIC_DIR') or (BASE_DIR / 'public'))

    # Event created by /add-event
    CALENDAR_ID: str = os.getenv('CALENDAR_ID', 'primary')
    EVENT_SUMMARY: str = os.getenv('EVENT_SUMMARY', 'Exam Schedule')
    EVENT_DESCRIPTION: str = os.getenv('EVENT_DESCRIPTION', 'Final examination for the semester')
    EVENT_START: str = os.getenv('EVENT_START', '2024-08-20T09:00:00')
    EVENT_END: str = os.getenv('EVENT_END', '2024-08-20T12:00:00')


settings = Settings()

from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings): # load all key=value pairs from .env
    """ Load service settings"""
    APP_TITLE: str = "Crossword Sync API"
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'crossword.db'}"
    ECHO_SQL: bool = False
    WS_PATH: str = "/ws"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "app_errors.log"

    model_config = SettingsConfigDict(
        env_file = BASE_DIR/".env",
        env_file_encoding = "utf-8",
        extra = "ignore",
    )

settings = Settings()

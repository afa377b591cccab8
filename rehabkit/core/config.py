import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../'))
load_dotenv(os.path.join(BASE_DIR, '.env'))


class Settings(BaseSettings):
    PROJECT_NAME: str = os.getenv('PROJECT_NAME', 'REHABKIT')
    API_PREFIX: str = '/api'
    BACKEND_CORS_ORIGINS: List[str] = ['*']
    DATABASE_URL: str = os.getenv('SQL_DATABASE_URL', 'sqlite:///' + os.path.join(BASE_DIR, 'rehabkit.db'))
    LOGGING_CONFIG_FILE: str = os.getenv('LOGGING_CONFIG_FILE', os.path.join(BASE_DIR, 'logging.ini'))

    # Exercise session settings
    SESSION_TIMEOUT: int = int(os.getenv('SESSION_TIMEOUT', '3600'))  # 1 hour default
    SESSION_LOG_ENABLED: bool = os.getenv('SESSION_LOG_ENABLED', 'false').lower() == 'true'
    SESSION_LOG_DIR: str = os.getenv('SESSION_LOG_DIR', os.path.join(BASE_DIR, 'data', 'logs'))
    REPORT_LIST_LIMIT: int = 50


settings = Settings()

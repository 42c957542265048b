import json
from pathlib import Path
from typing import Annotated, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_ENV_PATH = Path(__file__).resolve().parent / '.env'


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_PATH),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Synergia Event Booking API'
    VERSION: str = '0.1.0'
    PORT: int = 8000
    LOG_LEVEL: str = 'INFO'

    # MongoDB
    DATABASE_URL: str = 'mongodb://localhost:27017'
    DATABASE_NAME: str = 'synergia'
    MONGO_TIMEOUT_MS: int = 5000  # server selection timeout

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ['*']

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and v.startswith('['):
            return json.loads(v)
        if isinstance(v, str):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return ['*']


settings = Settings()  # type: ignore

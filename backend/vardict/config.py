import json
from typing import Annotated, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file="../.env", env_file_encoding="utf-8", extra="ignore")

    # FastAPI 애플리케이션 설정
    ENVIRONMENT: str = "development"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"  # 로그 레벨 설정

    # 데이터베이스 설정
    POSTGRES_SSLMODE: str = "disable"
    DATABASE_URL: str = "postgresql+asyncpg://user:postgres@db:5432/vardict_db"

    # CORS 설정 (JSON 배열 또는 콤마 구분 문자열)
    CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",
        "http://localhost:80",
        "http://localhost",
    ]

    # RAG 웹훅 (n8n) 설정
    RAG_WEBHOOK_URL: str = "https://koscom.app.n8n.cloud/webhook/invoke"
    RAG_API_KEY: str | None = None
    RAG_TIMEOUT: float = 30.0  # 초 단위
    RAG_MAX_RETRIES: int = 3
    RAG_CACHE_TTL: int = 3600  # 1시간
    RAG_MIN_CONFIDENCE: float = 0.0

    # 시작 시 사전 테이블이 비어 있으면 로드할 JSON 파일
    DICTIONARY_SEED_FILE: str | None = None

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _normalise_cors(cls, value):
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            raw = value.strip()
            if raw.startswith("[") and raw.endswith("]"):
                try:
                    parsed = json.loads(raw)
                    if isinstance(parsed, list):
                        return parsed
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in raw.split(",") if item.strip()]
        raise ValueError("CORS_ORIGINS must be a string or list of strings")

    @field_validator("RAG_MAX_RETRIES")
    @classmethod
    def _at_least_one_attempt(cls, value: int) -> int:
        if value < 1:
            raise ValueError("RAG_MAX_RETRIES must be >= 1")
        return value


settings = Config()

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Pipeline
    translate_api_key: str = ""
    to_lang: list[str] = ["en", "fr", "es", "ja", "ru"]
    translate_topic: str = "ocr-translate"
    result_topic: str = "ocr-result"
    result_bucket: str = "ocr-results"
    ingest_queue: str = "ocr-ingest"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Celery
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/1"
    stage_max_retries: int = 5

    # Storage
    storage_dir: str = "storage"
    upload_bucket: str = "ocr-uploads"

    # Capability providers
    detection_provider: str = "gemini"  # "gemini"
    translation_provider: str = "gemini"  # "gemini"
    gemini_model: str = "gemini-2.5-flash-lite"


@lru_cache
def get_settings() -> Settings:
    return Settings()

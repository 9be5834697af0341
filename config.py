from pydantic_settings import BaseSettings
from pydantic import Field, HttpUrl

class AppConfig(BaseSettings):
    llm_provider: str = "cloud"
    gemini_api_key: str | None = None
    cloud_model_name: str = "gemini-2.5-pro"
    cloud_vision_model_name: str = "gemini-2.5-flash"
    local_llm_endpoint: HttpUrl = "http://localhost:11434"
    local_model_name: str = "gemma2:9b"
    local_vision_model_name: str = "llava"
    gemini_temperature: float = 0.7
    llm_timeout_seconds: float = 120.0
    title_similarity_threshold: float = Field(0.75, ge=0.0, le=1.0)
    content_similarity_threshold: float = Field(0.85, ge=0.0, le=1.0)
    suite_store: str = "memory"
    minio_endpoint: str | None = None
    minio_access_key: str | None = None
    minio_secret_key: str | None = None
    minio_bucket: str = "qa-suites"
    minio_secure: bool = False
    log_level: str = "INFO"
    log_dir: str = "logs"

    class Config:
        env_file = ".env"
        extra = "ignore"

config = AppConfig()

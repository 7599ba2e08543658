"""Configuration management for oss-adapter."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Process settings with environment variable support."""

    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "oss-adapter"

    model_config = {
        "env_prefix": "OSS_ADAPTER_",
        "case_sensitive": False,
    }


settings = Settings()

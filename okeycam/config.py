from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    hand_size: int = 14
    joker_probability: float = 0.1
    mock_seed: int | None = None
    image_ttl_hours: int = 24
    feedback_prefix: str = "okey-feedback"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "mistralai/mistral-7b-instruct-v0.2"
    llm_max_tokens: int = 300
    llm_temperature: float = 0.0
    llm_top_p: float = 0.9

    extraction_max_attempts: int = 3
    extraction_backoff_seconds: float = 2.0

    db_path: str = "splitly.json"


@lru_cache
def get_settings() -> Settings:
    return Settings()

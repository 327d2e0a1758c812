from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    # 키가 없어도 기동은 되며, 생성 호출마다 config_error로 실패한다.
    llm_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("NVIDIA_NIM_API_KEY", "LLM_API_KEY"),
    )
    llm_base_url: str = "https://integrate.api.nvidia.com/v1"
    llm_model: str = "nvidia/llama-3.3-nemotron-super-49b-v1"
    llm_temperature: float = 0.2
    llm_max_tokens: int = 4000
    llm_timeout_ms: int = 60000

    planner_max_attempts: int = 2

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

# formgen/settings.py
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_API_KEY = "your_groq_api_key_here"


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="Form Generator")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # groq (OpenAI-compatible endpoint)
    GROQ_API_KEY: str | None = None
    GROQ_BASE_URL: str = Field(default="https://api.groq.com/openai/v1")
    GROQ_MODEL: str = Field(default="meta-llama/llama-4-maverick-17b-128e-instruct")
    GROQ_VISION_MODEL: str = Field(default="meta-llama/llama-4-scout-17b-16e-instruct")

    # generation
    LLM_TEMPERATURE: float = Field(default=0.3, ge=0.0, le=1.0)
    LLM_MAX_TOKENS: int = Field(default=4000, ge=100, le=8000)
    LLM_TIMEOUT: float = Field(default=30.0, ge=5.0, le=60.0)  # seconds
    LLM_MAX_RETRIES: int = Field(default=3, ge=1)
    LLM_RETRY_BASE_DELAY: float = Field(default=1.0, ge=0.0)  # seconds

    # offline dev client, no API calls
    USE_ECHO: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )

    @property
    def app_name(self) -> str:
        return self.APP_NAME


settings = Settings()

"""Application configuration."""

from typing import Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModelRateConfig(BaseModel):
    """One entry of the pricing table, rates in USD per million tokens."""

    model: str
    input_per_million: float
    output_per_million: Optional[float] = None
    cached_input_per_million: Optional[float] = None


DEFAULT_ALLOWED_MODELS = [
    "chatgpt-4o-latest",
    "gpt-4.1",
    "gpt-4.1-2025-04-14",
    "gpt-4.1-mini",
    "gpt-4.1-mini-2025-04-14",
    "gpt-4.1-nano",
    "gpt-4.1-nano-2025-04-14",
    "gpt-4o",
    "gpt-4o-2024-08-06",
    "gpt-4o-2024-11-20",
    "gpt-4o-mini",
    "gpt-4o-mini-2024-07-18",
]

DEFAULT_MODEL_PRICING = [
    ModelRateConfig(
        model="gpt-4.1", input_per_million=2.0, output_per_million=8.0, cached_input_per_million=0.5
    ),
    ModelRateConfig(
        model="gpt-4.1-mini", input_per_million=0.4, output_per_million=1.6, cached_input_per_million=0.1
    ),
    ModelRateConfig(
        model="gpt-4.1-nano", input_per_million=0.1, output_per_million=0.4, cached_input_per_million=0.025
    ),
    ModelRateConfig(
        model="gpt-4o", input_per_million=2.5, output_per_million=10.0, cached_input_per_million=1.25
    ),
    ModelRateConfig(
        model="gpt-4o-mini", input_per_million=0.15, output_per_million=0.6, cached_input_per_million=0.075
    ),
]

DEFAULT_MODEL_ALIASES = {
    "gpt-4.1-2025-04-14": "gpt-4.1",
    "gpt-4.1-mini-2025-04-14": "gpt-4.1-mini",
    "gpt-4.1-nano-2025-04-14": "gpt-4.1-nano",
    "chatgpt-4o-latest": "gpt-4o",
    "gpt-4o-2024-08-06": "gpt-4o",
    "gpt-4o-2024-11-20": "gpt-4o",
    "gpt-4o-mini-2024-07-18": "gpt-4o-mini",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    DEFAULT_MODEL: str = ""
    UPLOAD_PURPOSE: str = "assistants"

    # Cancellation
    TIMEOUT_THRESHOLD_S: float = 90.0
    DISCONNECT_POLL_S: float = 0.5

    # Model catalogue and pricing (complex values are read as JSON)
    ALLOWED_MODELS: list[str] = DEFAULT_ALLOWED_MODELS
    MODEL_PRICING: list[ModelRateConfig] = DEFAULT_MODEL_PRICING
    MODEL_ALIASES: dict[str, str] = DEFAULT_MODEL_ALIASES

    # Application
    APP_NAME: str = "DocJSON - Document to JSON Extractor"
    APP_ENV: str = "dev"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


# Global settings instance
settings = Settings()

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    import_max_input_bytes: int = Field(2 * 1024 * 1024, alias="IMPORT_MAX_INPUT_BYTES")
    ingredient_max_batch_size: int = Field(20, alias="INGREDIENT_MAX_BATCH_SIZE")
    ingredient_max_line_length: int = Field(500, alias="INGREDIENT_MAX_LINE_LENGTH")
    ingredient_confidence_threshold: float = Field(0.7, alias="INGREDIENT_CONFIDENCE_THRESHOLD")
    ingredient_default_confidence: float = Field(0.5, alias="INGREDIENT_DEFAULT_CONFIDENCE")
    # Per-batch estimate used for progress before the first batch finishes
    ingredient_batch_estimate_ms: int = Field(2000, alias="INGREDIENT_BATCH_ESTIMATE_MS")
    instruction_max_references: int = Field(20, alias="INSTRUCTION_MAX_REFERENCES")
    llm_base_url: str | None = Field(None, alias="LLM_BASE_URL")
    llm_full_model_name: str = Field("full", alias="JARVIS_FULL_MODEL_NAME")
    llm_app_id: str | None = Field(None, alias="LLM_APP_ID")
    llm_app_key: str | None = Field(None, alias="LLM_APP_KEY")
    llm_timeout_seconds: int = Field(60, alias="LLM_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()
    except PermissionError:
        logger.warning("Unable to read .env; continuing with environment variables only")
        settings = Settings(_env_file=None)
    return settings

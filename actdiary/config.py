"""Configuration loaded from environment (.env) and defaults."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_THIS_DIR = Path(__file__).resolve().parent          # actdiary/
_PROJECT_ROOT = _THIS_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM provider: openai | anthropic
    llm_provider: str = "openai"

    # OpenAI
    openai_api_key: str | None = None
    classify_model: str = "gpt-4.1-turbo"
    practice_model: str = "gpt-5"

    # Anthropic (used for both work types when llm_provider=anthropic)
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-3-5-sonnet-20241022"

    llm_temperature: float = 0.2
    llm_timeout_seconds: float = 60.0

    # Diary text is clipped to this many characters before it reaches the LLM
    max_text_chars: int = 3000

    # Speech synthesis: none | gemini | openai
    tts_provider: str = "none"
    gemini_api_key: str | None = None
    gemini_tts_model: str = "gemini-2.5-flash-preview-tts"
    gemini_tts_voice: str = "Kore"
    openai_tts_model: str = "gpt-4o-mini-tts"
    openai_tts_voice: str = "alloy"
    tts_timeout_seconds: float = 30.0
    tts_max_workers: int = 7

    # Job runner
    job_ttl_seconds: float = 3600.0
    dedupe_ttl_seconds: float = 600.0
    max_jobs: int = 1000
    max_workers: int = 4
    sync_wait_seconds: float = 120.0

    # CORS origins (comma-separated, "*" allows everything)
    cors_origins: str = "*"

    # Server port (Render injects PORT)
    port: int = 3000

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def api_key_for(self, provider_name: str) -> str | None:
        """Return the API key configured for an LLM provider name."""
        if provider_name.lower() == "anthropic":
            return self.anthropic_api_key
        return self.openai_api_key


def get_settings() -> Settings:
    return Settings()

from pydantic import BaseModel
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Deployment convention: a KEY=VALUE .env next to the package, real env vars win.
# Load .env file if it exists (before reading os.getenv)
_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    with open(_env_path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                # Only set if not already in environment (env vars take precedence)
                if key not in os.environ:
                    os.environ[key] = value


def _sanitize_ascii(val: str) -> str:
    """Strip non-ASCII characters from config values (prevents encoding errors)"""
    return val.encode('ascii', errors='ignore').decode('ascii').strip()


PROVIDERS = ("groq", "gemini", "openai")


class Settings(BaseModel):
    # LLM provider: "groq" (free, fast), "gemini" (free tier) or "openai" (paid)
    llm_provider: str = _sanitize_ascii(os.getenv("TODO_LLM_PROVIDER", "groq")).lower()

    # Models by provider
    groq_model: str = _sanitize_ascii(os.getenv("GROQ_MODEL", "llama-3.1-8b-instant"))
    gemini_model: str = _sanitize_ascii(os.getenv("GEMINI_MODEL", "gemini-1.5-flash"))
    openai_model: str = _sanitize_ascii(os.getenv("OPENAI_MODEL", "gpt-4o-mini"))

    temperature: float = float(os.getenv("TODO_LLM_TEMPERATURE", "0.7"))
    max_tokens: int = int(os.getenv("TODO_LLM_MAX_TOKENS", "1000"))
    request_timeout: float = float(os.getenv("TODO_LLM_TIMEOUT", "30"))

    # API keys (sanitized to prevent 'ascii' codec errors)
    groq_api_key: str = _sanitize_ascii(os.getenv("GROQ_API_KEY", ""))
    gemini_api_key: str = _sanitize_ascii(os.getenv("GEMINI_API_KEY", ""))
    openai_api_key: str = _sanitize_ascii(os.getenv("OPENAI_API_KEY", ""))

    # Endpoints
    groq_base_url: str = _sanitize_ascii(os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1"))
    openai_base_url: str = _sanitize_ascii(os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"))
    gemini_base_url: str = _sanitize_ascii(
        os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/models"))

    # Persistence: "json" | "sqlite" | "memory"
    storage_backend: str = os.getenv("TODO_STORAGE", "json").lower()
    storage_path: str = os.getenv("TODO_STORAGE_PATH", "data/todos.json")
    database_url: str = os.getenv("TODO_DATABASE_URL", "sqlite:///data/todos.db")

    # HTTP
    http_host: str = os.getenv("TODO_HTTP_HOST", "0.0.0.0")
    http_port: int = int(os.getenv("TODO_HTTP_PORT", "8000"))

    # Title matching tuning
    fuzzy_threshold: float = float(os.getenv("TODO_FUZZY_THRESHOLD", "0.7"))
    fuzzy_min_length: int = int(os.getenv("TODO_FUZZY_MIN_LENGTH", "3"))
    suggestion_min_score: int = int(os.getenv("TODO_SUGGESTION_MIN_SCORE", "2"))
    starts_with_bonus: int = int(os.getenv("TODO_STARTS_WITH_BONUS", "2"))
    max_suggestions: int = int(os.getenv("TODO_MAX_SUGGESTIONS", "3"))

    def api_key_for(self, provider: str) -> str:
        return getattr(self, f"{provider}_api_key", "")

    def model_for(self, provider: str) -> str:
        return getattr(self, f"{provider}_model", "")


settings = Settings()

if settings.llm_provider not in PROVIDERS:
    logger.warning(f"Config: unknown TODO_LLM_PROVIDER '{settings.llm_provider}', expected one of {PROVIDERS}")

# Log config for debugging
_key = settings.api_key_for(settings.llm_provider)
_masked = '***' + _key[-4:] if len(_key) > 4 else 'EMPTY'
logger.info(f"Config: LLM → {settings.llm_provider}, model={settings.model_for(settings.llm_provider)} (key={_masked})")
logger.info(f"Config: storage → {settings.storage_backend}")

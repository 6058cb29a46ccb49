from __future__ import annotations
import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _origins() -> tuple[str, ...]:
    raw = os.getenv("CORS_ORIGINS", "http://localhost:8080")
    return tuple(o.strip() for o in raw.split(",") if o.strip())


@dataclass(frozen=True)
class Settings:
    llm_provider: str = os.getenv("LLM_PROVIDER", "gemini").lower()
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-pro")
    gemini_base_url: str = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/models"
    )
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

    max_tokens: int = int(os.getenv("MAX_TOKENS", 2048))
    temperature: float = float(os.getenv("TEMPERATURE", 0.2))
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", 60))
    llm_max_attempts: int = int(os.getenv("LLM_MAX_ATTEMPTS", 1))

    max_reviews_per_prompt: int = int(os.getenv("MAX_REVIEWS_PER_PROMPT", 20))
    max_workers: int = int(os.getenv("MAX_WORKERS", 1))

    cache_enabled: bool = _flag("LLM_CACHE")
    cache_dir: str = os.getenv("CACHE_DIR", ".cache")
    duckdb_path: str = os.getenv("DUCKDB_PATH", "./data/warehouse.duckdb")
    cors_origins: tuple[str, ...] = field(default_factory=_origins)

    @property
    def gemini_url(self) -> str:
        return f"{self.gemini_base_url.rstrip('/')}/{self.gemini_model}:generateContent"

CFG = Settings()

import os
from typing import List, Optional

from pydantic import BaseModel

from sheetqa.errors import ConfigurationError
from sheetqa.models.types import CompletionOptions


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name, "").strip()
    return val or default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except Exception:
        return default


class Settings(BaseModel):
    spreadsheet_id: Optional[str] = None
    sheet_name: str = "Sheet1"
    google_api_key: Optional[str] = None

    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    embedding_model: str = "text-embedding-3-small"
    completion_model: str = "gpt-3.5-turbo-instruct"
    request_timeout: float = 30.0

    max_context_words: int = 1125
    completion: CompletionOptions = CompletionOptions()

    port: int = 8080
    allow_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        origins_env = _env_str("ALLOW_ORIGINS", "*")
        return cls(
            spreadsheet_id=_env_str("SPREADSHEET_ID"),
            sheet_name=_env_str("SHEET_NAME", "Sheet1"),
            google_api_key=_env_str("GOOGLE_API_KEY"),
            openai_api_key=_env_str("OPENAI_API_KEY"),
            openai_base_url=_env_str("OPENAI_BASE_URL"),
            embedding_model=_env_str("EMBEDDING_MODEL", "text-embedding-3-small"),
            completion_model=_env_str("COMPLETION_MODEL", "gpt-3.5-turbo-instruct"),
            request_timeout=_env_float("REQUEST_TIMEOUT_SECONDS", 30.0),
            max_context_words=_env_int("MAX_CONTEXT_WORDS", 1125),
            completion=CompletionOptions(
                temperature=_env_float("COMPLETION_TEMPERATURE", 0.0),
                max_tokens=_env_int("COMPLETION_MAX_TOKENS", 300),
                top_p=_env_float("COMPLETION_TOP_P", 1.0),
                frequency_penalty=_env_float("COMPLETION_FREQUENCY_PENALTY", 0.0),
                presence_penalty=_env_float("COMPLETION_PRESENCE_PENALTY", 0.0),
            ),
            port=_env_int("PORT", 8080),
            allow_origins=[o.strip() for o in origins_env.split(",") if o.strip()] or ["*"],
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        )

    def require(self, *names: str) -> None:
        """Raise ConfigurationError naming every listed setting that is unset."""
        missing = [n for n in names if not getattr(self, n, None)]
        if missing:
            raise ConfigurationError("missing required settings: " + ", ".join(missing))

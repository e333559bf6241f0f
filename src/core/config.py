"""
Environment-driven configuration for the answer bot.

Values come from the process environment, with a project-level .env file
loaded first when present.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Load .env file if it exists
_env_file = PROJECT_ROOT / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


DEFAULT_LLM_MODEL = "gpt-4o-mini"
DEFAULT_DOCUMENTS_PATH = PROJECT_ROOT / "data" / "documents.jsonl"
DEFAULT_STORAGE_CONTAINER = "content"


def _env_str(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class AppConfig:
    """Settings for the completion provider, local search and citations."""

    llm_model: str = DEFAULT_LLM_MODEL
    llm_api_key: Optional[str] = None
    llm_base_url: Optional[str] = None
    llm_temperature: float = 0.3
    llm_max_tokens: int = 1024
    llm_timeout: float = 60.0
    documents_path: Path = DEFAULT_DOCUMENTS_PATH
    citation_base_url_override: Optional[str] = None
    storage_account: Optional[str] = None
    storage_container: str = DEFAULT_STORAGE_CONTAINER
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build the configuration from environment variables."""
        documents_path = _env_str("DOCUMENTS_PATH")
        return cls(
            llm_model=_env_str("LLM_MODEL") or DEFAULT_LLM_MODEL,
            llm_api_key=_env_str("LLM_API_KEY") or _env_str("OPENAI_API_KEY"),
            llm_base_url=_env_str("LLM_BASE_URL"),
            llm_temperature=_env_float("LLM_TEMPERATURE", 0.3),
            llm_max_tokens=_env_int("LLM_MAX_TOKENS", 1024),
            llm_timeout=_env_float("LLM_TIMEOUT", 60.0),
            documents_path=Path(documents_path) if documents_path else DEFAULT_DOCUMENTS_PATH,
            citation_base_url_override=_env_str("CITATION_BASE_URL"),
            storage_account=_env_str("STORAGE_ACCOUNT"),
            storage_container=_env_str("STORAGE_CONTAINER") or DEFAULT_STORAGE_CONTAINER,
            log_level=(_env_str("LOG_LEVEL") or "INFO").upper(),
        )

    def citation_base_url(self) -> str:
        """
        Base URL that renderers join with cited filenames.

        An explicit CITATION_BASE_URL wins; otherwise the blob container URL is
        derived from the storage account. Empty when neither is configured.
        """
        if self.citation_base_url_override:
            return self.citation_base_url_override.rstrip("/")
        if self.storage_account:
            return f"https://{self.storage_account}.blob.core.windows.net/{self.storage_container}"
        return ""

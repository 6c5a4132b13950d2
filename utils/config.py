"""Runtime configuration for the audit pipeline."""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

SCORING_MODES = ("mean", "weighted")


def load_env_file(paths=None) -> bool:
    """Load environment variables from a .env file.

    Existing environment variables win over values in the file.
    """
    env_paths = paths or [
        Path(__file__).parent.parent / ".env",
        Path.cwd() / ".env",
    ]
    for env_path in env_paths:
        env_path = Path(env_path)
        if env_path.exists():
            with open(env_path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        os.environ.setdefault(key.strip(), value.strip().strip('"').strip("'"))
            logger.info("Loaded environment from: %s", env_path)
            return True
    return False


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}", setting=name)


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, default))


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AuditConfig:
    """
    Explicit configuration injected into the Orchestrator.

    Everything the pipeline needs from the environment lives here, so
    tests can build one directly instead of patching globals.
    """
    # Text generation
    llm_provider: str = "mistral"
    llm_model: Optional[str] = None
    llm_api_key: Optional[str] = None
    mistral_base_url: str = "https://api.mistral.ai/v1"
    temperature: float = 0.2
    max_tokens: int = 500
    agent_timeout: float = 5.0

    # Extraction
    fetch_timeout: float = 8.0
    max_page_bytes: int = 2_000_000
    max_text_chars: int = 1500
    max_hero_chars: int = 600
    max_field_chars: int = 300
    hero_markup_chars: int = 4000
    block_private_hosts: bool = True
    user_agent: str = (
        "Mozilla/5.0 (compatible; WebsiteAuditBot/1.0; +https://example.com/bot)"
    )

    # Aggregation
    scoring_mode: str = "mean"

    # Persistence
    database_url: str = "sqlite:///./website_audits.db"

    log_level: str = "INFO"

    def __post_init__(self):
        self.llm_provider = (self.llm_provider or "mistral").lower()
        self.scoring_mode = (self.scoring_mode or "mean").lower()
        if self.scoring_mode not in SCORING_MODES:
            raise ConfigError(
                f"scoring_mode must be one of {', '.join(SCORING_MODES)}, got {self.scoring_mode!r}",
                setting="SCORING_MODE",
            )
        if self.agent_timeout <= 0 or self.fetch_timeout <= 0:
            raise ConfigError("Timeouts must be positive")

    @classmethod
    def from_env(cls) -> "AuditConfig":
        """Build configuration from environment variables."""
        defaults = cls()
        return cls(
            llm_provider=os.environ.get("LLM_PROVIDER", defaults.llm_provider),
            llm_model=os.environ.get("LLM_MODEL") or None,
            mistral_base_url=os.environ.get("MISTRAL_BASE_URL", defaults.mistral_base_url),
            temperature=_env_float("LLM_TEMPERATURE", defaults.temperature),
            max_tokens=_env_int("LLM_MAX_TOKENS", defaults.max_tokens),
            agent_timeout=_env_float("AGENT_TIMEOUT_SECONDS", defaults.agent_timeout),
            fetch_timeout=_env_float("FETCH_TIMEOUT_SECONDS", defaults.fetch_timeout),
            block_private_hosts=_env_bool("BLOCK_PRIVATE_HOSTS", defaults.block_private_hosts),
            scoring_mode=os.environ.get("SCORING_MODE", defaults.scoring_mode),
            database_url=os.environ.get("DATABASE_URL", defaults.database_url),
            log_level=os.environ.get("LOG_LEVEL", defaults.log_level).upper(),
        )

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

# ─── Provider Defaults ─────────────────────────────────────────────────────────

DEFAULT_PROVIDER = "gemini"

DEFAULT_MODELS = {
    "gemini": "gemini-1.5-flash",
    "openai": "gpt-4o-mini",
    "claude": "claude-3-5-sonnet-20241022",
}

PROVIDER_KEY_ENV = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
}

DEFAULT_PRACTITIONER = "Dr. [VOTRE NOM]"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    provider: str
    model_id: str
    api_key: Optional[str]
    timeout: Optional[float]
    practitioner: str
    cors_origins: List[str]
    log_level: str


def _parse_timeout(raw: str) -> Optional[float]:
    """Seconds as a positive number; anything else means no timeout."""
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0.0
    if not timeout > 0:
        logging.getLogger("endo_referral").warning(
            f"Ignoring REWRITE_TIMEOUT_SECONDS={raw!r}: expected a positive number of seconds"
        )
        return None
    return timeout


def _parse_log_level(raw: str) -> str:
    level = raw.upper().strip()
    if level not in LOG_LEVELS:
        return "INFO"
    return level


def get_settings() -> Settings:
    """
    Read the service configuration from the environment.
    Not cached: the credential is looked up again on every rewrite call.
    """
    provider = os.getenv("REWRITE_PROVIDER", DEFAULT_PROVIDER).lower().strip()
    key_env = PROVIDER_KEY_ENV.get(provider, f"{provider.upper()}_API_KEY")
    timeout = os.getenv("REWRITE_TIMEOUT_SECONDS", "").strip()

    return Settings(
        provider=provider,
        model_id=os.getenv("REWRITE_MODEL") or DEFAULT_MODELS.get(provider, ""),
        api_key=os.getenv(key_env) or None,
        timeout=_parse_timeout(timeout),
        practitioner=os.getenv("PRACTITIONER_NAME") or DEFAULT_PRACTITIONER,
        cors_origins=os.getenv(
            "CORS_ORIGINS",
            "http://localhost:8000,http://127.0.0.1:8000"
        ).split(","),
        log_level=_parse_log_level(os.getenv("LOG_LEVEL", "INFO")),
    )

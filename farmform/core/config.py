"""
Application configuration and settings
"""
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from farmform.core.errors import ConfigurationError

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./farmform.db"
DEFAULT_REGISTRATION_FEE = 30000  # paise (300 INR)
DEFAULT_CURRENCY = "INR"
DEFAULT_ALLOWED_ORIGINS = "http://localhost:5173,http://localhost:3000"
DEFAULT_PORT = 8080


def _parse_origins(raw: str) -> Tuple[str, ...]:
    return tuple(o.strip().rstrip("/") for o in raw.split(",") if o.strip())


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Immutable settings, built once at startup and passed to services."""

    razorpay_key_id: str
    razorpay_key_secret: str = field(repr=False)
    database_url: str = DEFAULT_DATABASE_URL
    registration_fee: int = DEFAULT_REGISTRATION_FEE
    currency: str = DEFAULT_CURRENCY
    allowed_origins: Tuple[str, ...] = _parse_origins(DEFAULT_ALLOWED_ORIGINS)
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    project_name: str = "Farmer Registration API"
    version: str = "1.0.0"

    def __post_init__(self):
        if not self.razorpay_key_id or not self.razorpay_key_secret:
            raise ConfigurationError(
                "Razorpay keys missing. Set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET."
            )
        if self.registration_fee <= 0:
            raise ConfigurationError("REGISTRATION_FEE must be greater than 0")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            razorpay_key_id=env.get("RAZORPAY_KEY_ID", ""),
            razorpay_key_secret=env.get("RAZORPAY_KEY_SECRET", ""),
            database_url=env.get("DATABASE_URL") or DEFAULT_DATABASE_URL,
            registration_fee=_parse_int(env, "REGISTRATION_FEE", DEFAULT_REGISTRATION_FEE),
            currency=(env.get("REGISTRATION_CURRENCY") or DEFAULT_CURRENCY).upper(),
            allowed_origins=_parse_origins(env.get("ALLOWED_ORIGINS") or DEFAULT_ALLOWED_ORIGINS),
            port=_parse_int(env, "PORT", DEFAULT_PORT),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Settings for the running process; raises ConfigurationError when incomplete."""
    return Settings.from_env()

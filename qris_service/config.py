"""Service settings, read from the environment (and a .env file if present)."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .rewriter import AmountMode


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 33416
    amount_mode: AmountMode = AmountMode.STATIC
    artifact_ttl: int = 300
    sweep_interval: int = 60
    cache_max_entries: Optional[int] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        mode = os.getenv("QRIS_AMOUNT_MODE", AmountMode.STATIC.value).strip().lower()
        try:
            amount_mode = AmountMode(mode)
        except ValueError:
            choices = ", ".join(m.value for m in AmountMode)
            raise ValueError(f"QRIS_AMOUNT_MODE must be one of {choices}, got {mode!r}")
        ttl = _int_env("QRIS_ARTIFACT_TTL", cls.artifact_ttl)
        interval = _int_env("QRIS_SWEEP_INTERVAL", cls.sweep_interval)
        if ttl <= 0 or interval <= 0:
            raise ValueError("QRIS_ARTIFACT_TTL and QRIS_SWEEP_INTERVAL must be positive")
        max_entries = _int_env("QRIS_CACHE_MAX_ENTRIES", 0)
        return cls(
            host=os.getenv("QRIS_SERVICE_HOST", cls.host),
            port=_int_env("QRIS_SERVICE_PORT", cls.port),
            amount_mode=amount_mode,
            artifact_ttl=ttl,
            sweep_interval=interval,
            cache_max_entries=max_entries if max_entries > 0 else None,
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )

"""
oscript_price.config — contract policy flags, storage caps, address format
and logging defaults.

Configuration precedence:
  1) Environment variables (OSCRIPT_PRICE_*)
  2) Hardcoded safe defaults below

Key env vars (case-insensitive where boolean):
  - OSCRIPT_PRICE_STRICT_INIT               (bool)   default: false
  - OSCRIPT_PRICE_MAX_STORAGE_KEY_BYTES     (int)    default: 64
  - OSCRIPT_PRICE_MAX_STORAGE_VAL_BYTES     (int)    default: 131_072   (128 KiB)
  - OSCRIPT_PRICE_ADDRESS_FORMAT            (str)    default: hex       (hex | mock)
  - OSCRIPT_PRICE_ADDRESS_BYTES             (int)    default: 20
  - OSCRIPT_PRICE_LOG_LEVEL                 (str)    default: INFO
  - OSCRIPT_PRICE_LOG_FORMAT                (str)    default: console   (console | json)

`strict_init` decides what a second `init` does: when false (the default) it
overwrites the stored record, when true it fails with AlreadyInitialized.

Usage:
    from oscript_price.config import load_config
    CFG = load_config()
    if CFG.strict_init: ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Tuple

ADDRESS_FORMATS: Tuple[str, ...] = ("hex", "mock")
LOG_FORMATS: Tuple[str, ...] = ("console", "json")
LOG_LEVELS: Tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ----------------------------- helpers ---------------------------------------


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "t", "yes", "y", "on")


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


def _env_choice(name: str, default: str, choices: Tuple[str, ...], *, upper: bool = False) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().upper() if upper else raw.strip().lower()
    return val if val in choices else default


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class ContractConfig:
    # Policy
    strict_init: bool

    # Storage caps (enforced by runtime.storage_api)
    max_storage_key_bytes: int
    max_storage_value_bytes: int

    # Address canonicalization
    address_format: str
    address_bytes: int

    # Logging
    log_level: str
    log_format: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "strict_init": self.strict_init,
            "max_storage_key_bytes": self.max_storage_key_bytes,
            "max_storage_value_bytes": self.max_storage_value_bytes,
            "address_format": self.address_format,
            "address_bytes": self.address_bytes,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


@lru_cache(maxsize=1)
def load_config() -> ContractConfig:
    """
    Build and cache a ContractConfig from environment + safe defaults.

    Tests that tweak the environment call ``load_config.cache_clear()``.
    """
    return ContractConfig(
        strict_init=_env_bool("OSCRIPT_PRICE_STRICT_INIT", False),
        max_storage_key_bytes=_env_int("OSCRIPT_PRICE_MAX_STORAGE_KEY_BYTES", 64, min_v=8, max_v=256),
        max_storage_value_bytes=_env_int("OSCRIPT_PRICE_MAX_STORAGE_VAL_BYTES", 131_072, min_v=64, max_v=1_048_576),
        address_format=_env_choice("OSCRIPT_PRICE_ADDRESS_FORMAT", "hex", ADDRESS_FORMATS),
        address_bytes=_env_int("OSCRIPT_PRICE_ADDRESS_BYTES", 20, min_v=8, max_v=64),
        log_level=_env_choice("OSCRIPT_PRICE_LOG_LEVEL", "INFO", LOG_LEVELS, upper=True),
        log_format=_env_choice("OSCRIPT_PRICE_LOG_FORMAT", "console", LOG_FORMATS),
    )


__all__ = ["ContractConfig", "load_config", "ADDRESS_FORMATS", "LOG_FORMATS", "LOG_LEVELS"]

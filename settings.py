from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_TABLE_NAME_ENV = "ASSESSMENT_TABLE_NAME"
_TABLE_PATH_ENV = "ASSESSMENT_PERSISTENCE_PATH"
_MAX_KEY_BYTES_ENV = "ASSESSMENT_MAX_KEY_BYTES"
_MAX_VALUE_BYTES_ENV = "ASSESSMENT_MAX_VALUE_BYTES"
_DEFAULT_CALLER_ENV = "DEFAULT_CALLER_ID"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    table_name: str
    table_persistence_path: Optional[str]
    max_key_bytes: int
    max_value_bytes: Optional[int]
    default_caller_id: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        table_name=_read_str_env(_TABLE_NAME_ENV, "energy_assessments"),
        table_persistence_path=_read_optional_env(_TABLE_PATH_ENV, "./tmp/assessments.json"),
        max_key_bytes=_read_positive_int(_MAX_KEY_BYTES_ENV, 44) or 44,
        max_value_bytes=_read_positive_int(_MAX_VALUE_BYTES_ENV, None),
        default_caller_id=_read_str_env(_DEFAULT_CALLER_ENV, "anonymous"),
        log_level=_read_log_level("INFO"),
    )

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


def normalize_entry(value: Any) -> Optional[str]:
    """Reduce a stored rule entry to its plain pattern string.

    Entries may be plain strings or mappings carrying a "pattern" or "url" key.
    """
    if isinstance(value, dict):
        value = value.get("pattern") or value.get("url")
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class PolicyConfig(BaseModel):
    mode: str = "blacklist"
    enabled: bool = True
    allow_patterns: list[str] = Field(default_factory=list)
    deny_patterns: list[str] = Field(default_factory=list)
    allow_keywords: list[str] = Field(default_factory=list)
    deny_keywords: list[str] = Field(default_factory=list)

    @field_validator(
        "allow_patterns",
        "deny_patterns",
        "allow_keywords",
        "deny_keywords",
        mode="before",
    )
    @classmethod
    def normalize_entries(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, (str, dict)):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("expected a list of entries")
        entries = (normalize_entry(item) for item in value)
        return [entry for entry in entries if entry]


class Settings(BaseModel):
    log_level: str = "INFO"
    policy: PolicyConfig = Field(default_factory=PolicyConfig)


def load_config(path: Optional[str] = None) -> Settings:
    if not path:
        return Settings()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return Settings()
    data = yaml.safe_load(cfg_path.read_text()) or {}
    return Settings(**data)

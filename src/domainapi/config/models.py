"""Pydantic configuration sections with code-baked defaults.

Sparse TOML contract: defaults live here, domainapi.toml only holds
overrides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    backend: Literal["sqlite", "json", "memory"] = "sqlite"
    path: Path | None = None


class DispatchConfig(BaseModel):
    """[dispatch] section.

    ``timeout`` is in seconds; None leaves resolver calls unbounded.
    """

    model_config = {"frozen": True}

    timeout: float | None = None
    verify_tls: bool = True

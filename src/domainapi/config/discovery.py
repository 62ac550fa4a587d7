"""Config file discovery.

Walk-up finder locates domainapi.toml, similar to how git finds .git/.
The DOMAINAPI_CONFIG env var and the --config CLI flag take precedence.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "domainapi.toml"
CONFIG_ENV_VAR = "DOMAINAPI_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for domainapi.toml."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs:   CLI flags passed by Click
  2. Env vars:      ``DOMAINAPI_*`` prefix, ``__`` for nested sections
  3. TOML file:     ``domainapi.toml`` discovered via walk-up
  4. Code defaults: baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from domainapi.config.discovery import find_config
from domainapi.config.models import DispatchConfig, StoreConfig

DEFAULT_SQLITE_PATH = Path(".domainapi") / "domains.db"
DEFAULT_JSON_DIR = Path("domains")


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``domainapi.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class ApiSettings(BaseSettings):
    """Settings for the domainapi CLI and embedding applications.

    Attributes:
        project_root: Directory relative store paths resolve against
            (parent of ``domainapi.toml``, or CWD if none was found).
        config_path: The TOML file in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "DOMAINAPI_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    store: StoreConfig = Field(default_factory=StoreConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> ApiSettings:
        """Construct settings from a CLI invocation.

        Uses *config_path* when given, otherwise discovers ``domainapi.toml``
        by walking up from *project_root* (or CWD).
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(project_root=resolved_root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    def store_path(self) -> Path:
        """Absolute location of the configured store backend."""
        path = self.store.path
        if path is None:
            path = DEFAULT_JSON_DIR if self.store.backend == "json" else DEFAULT_SQLITE_PATH
        return path if path.is_absolute() else self.project_root / path

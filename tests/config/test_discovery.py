"""Tests for config discovery and the section models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from domainapi.config.discovery import CONFIG_FILENAME, find_config
from domainapi.config.models import DispatchConfig, StoreConfig


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOMAINAPI_CONFIG", raising=False)


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[store]\nbackend = "json"\n')
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("")
        monkeypatch.setenv("DOMAINAPI_CONFIG", str(config_file))
        assert find_config(tmp_path / "elsewhere") == config_file

    def test_env_var_pointing_nowhere(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("DOMAINAPI_CONFIG", str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestSectionModels:
    def test_defaults(self) -> None:
        assert StoreConfig().backend == "sqlite"
        assert StoreConfig().path is None
        assert DispatchConfig().timeout is None
        assert DispatchConfig().verify_tls is True

    def test_validates_sparse_sections(self) -> None:
        store = StoreConfig.model_validate({"backend": "json", "path": "models"})
        assert store.path == Path("models")
        assert DispatchConfig.model_validate({"timeout": 2.5}).timeout == 2.5

    def test_rejects_unknown_backend(self) -> None:
        with pytest.raises(ValidationError):
            StoreConfig(backend="redis")  # type: ignore[arg-type]

    def test_models_are_frozen(self) -> None:
        with pytest.raises(ValidationError):
            StoreConfig().backend = "json"  # type: ignore[misc]

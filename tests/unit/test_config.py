"""Tests for dynamic_status_list.config — StatusListSettings."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from dynamic_status_list.config import StatusListSettings
from dynamic_status_list.errors import InputError


class TestDefaults:
    def test_default_period(self) -> None:
        assert StatusListSettings().period_seconds == 60

    def test_default_file_names(self) -> None:
        settings = StatusListSettings()
        assert settings.registry_path == Path("dsl-map.json")
        assert settings.publication_path == Path("dsl.json")
        assert settings.holder_proof_path == Path("holder_status-list-identifier.json")


class TestValidation:
    def test_zero_period_rejected(self) -> None:
        with pytest.raises(InputError):
            StatusListSettings.create(period_seconds=0)

    def test_settings_are_frozen(self) -> None:
        settings = StatusListSettings()
        with pytest.raises(ValidationError):
            settings.period_seconds = 30  # type: ignore[misc]


class TestFromEnv:
    def test_reads_environment(self, tmp_path: Path) -> None:
        settings = StatusListSettings.from_env(
            {"DSL_PERIOD_SECONDS": "30", "DSL_DATA_DIR": str(tmp_path)}
        )
        assert settings.period_seconds == 30
        assert settings.data_dir == tmp_path

    def test_overrides_win(self) -> None:
        settings = StatusListSettings.from_env({"DSL_PERIOD_SECONDS": "30"}, period_seconds=10)
        assert settings.period_seconds == 10

    def test_none_overrides_ignored(self) -> None:
        settings = StatusListSettings.from_env({"DSL_PERIOD_SECONDS": "30"}, period_seconds=None)
        assert settings.period_seconds == 30

    def test_bad_environment_value(self) -> None:
        with pytest.raises(InputError):
            StatusListSettings.from_env({"DSL_PERIOD_SECONDS": "soon"})


class TestResolve:
    def test_relative_joined_to_data_dir(self, tmp_path: Path) -> None:
        settings = StatusListSettings(data_dir=tmp_path)
        assert settings.key_path == tmp_path / "issuer-key.pem"

    def test_absolute_kept(self, tmp_path: Path) -> None:
        settings = StatusListSettings(data_dir=tmp_path / "data")
        target = tmp_path / "elsewhere.json"
        assert settings.resolve(target) == target

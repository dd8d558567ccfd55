"""Tests for YAML settings loading."""

from pathlib import Path

import pytest

from pahcer_desk.settings.infrastructure.errors import (
    MissingEnvVarsError,
    SettingsLoadError,
    SettingsValidationError,
)
from pahcer_desk.settings.infrastructure.yaml_loader import YamlSettingsLoader
from tests.settings.fake_observer import FakeSettingsObserver


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    """Without a settings file every path is derived from the project root."""

    def test_paths_resolved_against_project_root(self, tmp_path: Path) -> None:
        settings = YamlSettingsLoader(observer=FakeSettingsObserver()).load(
            path=None, project_root=tmp_path
        )

        root = tmp_path.resolve()
        assert settings.project_root == root
        assert settings.results_dir == root / "data" / "results"
        assert settings.config_file == root / "pahcer_config.toml"
        assert settings.config_backup_file == root / "pahcer_config.toml.bak"
        assert settings.best_scores_file == root / "pahcer" / "best_scores.json"
        assert settings.summary_dir == root / "pahcer" / "json"
        assert settings.scratch_dir == root / "tools" / "out"
        assert settings.scratch_backup_dir == root / "tools" / "out_bak"

    def test_default_tool_command(self, tmp_path: Path) -> None:
        settings = YamlSettingsLoader(observer=FakeSettingsObserver()).load(
            path=None, project_root=tmp_path
        )
        assert settings.tool_command == ["pahcer", "run"]
        assert settings.case_output_width == 4

    def test_emits_loaded_event_with_defaults_source(self, tmp_path: Path) -> None:
        observer = FakeSettingsObserver()
        YamlSettingsLoader(observer=observer).load(path=None, project_root=tmp_path)

        assert len(observer.loaded) == 1
        assert observer.loaded[0].source == "defaults"


class TestSettingsFile:
    def test_overrides_are_applied(self, tmp_path: Path) -> None:
        settings_file = _write(
            tmp_path / "desk.yaml",
            "results_dir: history\ntool_command: [cargo, run, --bin, pahcer]\n",
        )

        settings = YamlSettingsLoader(observer=FakeSettingsObserver()).load(
            path=settings_file, project_root=tmp_path / "elsewhere"
        )

        assert settings.project_root == (tmp_path / "elsewhere").resolve()
        assert settings.results_dir == (tmp_path / "elsewhere").resolve() / "history"
        assert settings.tool_command == ["cargo", "run", "--bin", "pahcer"]

    def test_relative_project_root_is_relative_to_file(self, tmp_path: Path) -> None:
        (tmp_path / "conf").mkdir()
        settings_file = _write(tmp_path / "conf" / "desk.yaml", "project_root: ..\n")

        settings = YamlSettingsLoader(observer=FakeSettingsObserver()).load(
            path=settings_file, project_root=Path("/ignored")
        )

        assert settings.project_root == tmp_path.resolve()

    def test_absolute_paths_are_kept(self, tmp_path: Path) -> None:
        results = tmp_path / "abs-results"
        settings_file = _write(tmp_path / "desk.yaml", f"results_dir: {results}\n")

        settings = YamlSettingsLoader(observer=FakeSettingsObserver()).load(
            path=settings_file, project_root=tmp_path
        )

        assert settings.results_dir == results

    def test_env_vars_are_interpolated(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PD_RESULTS_DIR", "runs")
        settings_file = _write(tmp_path / "desk.yaml", "results_dir: ${PD_RESULTS_DIR}\n")

        settings = YamlSettingsLoader(observer=FakeSettingsObserver()).load(
            path=settings_file, project_root=tmp_path
        )

        assert settings.results_dir == tmp_path.resolve() / "runs"

    def test_empty_file_yields_defaults(self, tmp_path: Path) -> None:
        settings_file = _write(tmp_path / "desk.yaml", "")

        settings = YamlSettingsLoader(observer=FakeSettingsObserver()).load(
            path=settings_file, project_root=tmp_path
        )

        assert settings.tool_command == ["pahcer", "run"]

    def test_emits_loaded_event_with_file_source(self, tmp_path: Path) -> None:
        settings_file = _write(tmp_path / "desk.yaml", "case_output_width: 5\n")
        observer = FakeSettingsObserver()

        YamlSettingsLoader(observer=observer).load(
            path=settings_file, project_root=tmp_path
        )

        assert observer.loaded[0].source == str(settings_file)


class TestSettingsErrors:
    def test_missing_file_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(SettingsLoadError):
            YamlSettingsLoader(observer=FakeSettingsObserver()).load(
                path=tmp_path / "absent.yaml", project_root=tmp_path
            )

    def test_missing_env_vars_are_all_reported(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("PD_NOPE_ONE", raising=False)
        monkeypatch.delenv("PD_NOPE_TWO", raising=False)
        settings_file = _write(
            tmp_path / "desk.yaml",
            "results_dir: ${PD_NOPE_ONE}\nscratch_dir: ${PD_NOPE_TWO}\n",
        )

        with pytest.raises(MissingEnvVarsError) as exc_info:
            YamlSettingsLoader(observer=FakeSettingsObserver()).load(
                path=settings_file, project_root=tmp_path
            )

        assert sorted(exc_info.value.missing_vars) == ["PD_NOPE_ONE", "PD_NOPE_TWO"]

    def test_non_mapping_raises_validation_error(self, tmp_path: Path) -> None:
        settings_file = _write(tmp_path / "desk.yaml", "- just\n- a list\n")

        with pytest.raises(SettingsValidationError):
            YamlSettingsLoader(observer=FakeSettingsObserver()).load(
                path=settings_file, project_root=tmp_path
            )

    def test_schema_violation_raises_validation_error(self, tmp_path: Path) -> None:
        settings_file = _write(tmp_path / "desk.yaml", "case_output_width: 0\n")

        with pytest.raises(SettingsValidationError):
            YamlSettingsLoader(observer=FakeSettingsObserver()).load(
                path=settings_file, project_root=tmp_path
            )

    def test_empty_tool_command_is_rejected(self, tmp_path: Path) -> None:
        settings_file = _write(tmp_path / "desk.yaml", "tool_command: []\n")

        with pytest.raises(SettingsValidationError):
            YamlSettingsLoader(observer=FakeSettingsObserver()).load(
                path=settings_file, project_root=tmp_path
            )

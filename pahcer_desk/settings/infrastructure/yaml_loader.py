"""YAML settings loader: parses, interpolates env vars, validates, emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pahcer_desk.settings.domain.observer import SettingsObserver
from pahcer_desk.settings.domain.settings import AppSettings
from pahcer_desk.settings.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from pahcer_desk.settings.infrastructure.errors import (
    MissingEnvVarsError,
    SettingsLoadError,
    SettingsValidationError,
)


class YamlSettingsLoader:
    """Builds AppSettings from an optional YAML file."""

    def __init__(self, observer: SettingsObserver) -> None:
        self._observer = observer

    def load(self, path: Path | None, project_root: Path) -> AppSettings:
        """
        Load settings from ``path``, or return defaults rooted at ``project_root``.

        A ``project_root`` key inside the file wins over the argument; a relative
        value there is taken relative to the file's own directory.

        Raises:
            SettingsLoadError: if ``path`` is given but does not exist.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset.
            SettingsValidationError: if the file is not a mapping or the schema
                is violated.
        """
        if path is None:
            settings = _build_settings({"project_root": project_root})
            self._observer.settings_loaded(
                source="defaults", project_root=str(settings.project_root)
            )
            return settings

        raw = _parse_yaml(path=path)
        missing = collect_missing_vars(raw)
        if missing:
            raise MissingEnvVarsError(missing)
        data = interpolate(raw)
        if not isinstance(data, dict):
            raise SettingsValidationError(
                f"top-level settings must be a mapping, got {type(data).__name__}"
            )

        root_value = data.get("project_root")
        if root_value is None:
            data = {**data, "project_root": project_root}
        else:
            root = Path(str(root_value)).expanduser()
            if not root.is_absolute():
                root = path.parent / root
            data = {**data, "project_root": root}

        settings = _build_settings(data)
        self._observer.settings_loaded(
            source=str(path), project_root=str(settings.project_root)
        )
        return settings


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            # Empty file -> {}
            return yaml.safe_load(fh) or {}
    except FileNotFoundError:
        raise SettingsLoadError(path=path)


def _build_settings(data: dict[str, Any]) -> AppSettings:
    try:
        return AppSettings.model_validate(data)
    except ValidationError as exc:
        raise SettingsValidationError(str(exc)) from exc

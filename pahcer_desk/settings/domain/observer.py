"""Observer port for the settings domain."""

from typing import Protocol


class SettingsObserver(Protocol):
    def settings_loaded(self, source: str, project_root: str) -> None: ...

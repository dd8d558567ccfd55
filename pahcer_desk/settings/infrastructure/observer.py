"""Structlog implementation of the SettingsObserver port."""

import structlog


class StructlogSettingsObserver:
    """Delegates settings domain events to structlog.

    Satisfies the SettingsObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def settings_loaded(self, source: str, project_root: str) -> None:
        self._log.info("settings.loaded", source=source, project_root=project_root)

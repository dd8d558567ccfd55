"""Error types raised by settings infrastructure."""

from pathlib import Path

from pahcer_desk.core.errors import PahcerDeskError


class MissingEnvVarsError(PahcerDeskError):
    """Raised when one or more required environment variables are not set."""

    def __init__(self, missing_vars: list[str]) -> None:
        self.missing_vars = missing_vars
        var_list = ", ".join(sorted(missing_vars))
        super().__init__(
            f"Failed to load settings: missing environment variables: {var_list}"
        )


class SettingsValidationError(PahcerDeskError):
    """Raised when the loaded settings fail schema validation."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to validate settings: {reason}")


class SettingsLoadError(PahcerDeskError):
    """Raised when the settings file cannot be opened or read."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Failed to load settings: file not found: {path}")

"""AppSettings: where the tool lives and where run results are kept."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

# Fields resolved against project_root when given as relative paths.
_PROJECT_RELATIVE_FIELDS: tuple[str, ...] = (
    "results_dir",
    "config_file",
    "config_backup_file",
    "best_scores_file",
    "summary_dir",
    "scratch_dir",
    "scratch_backup_dir",
)


class AppSettings(BaseModel, frozen=True):
    """Root settings aggregate for a pahcer-desk installation.

    Every path other than ``project_root`` may be written relative to the
    project root; validation turns them into absolute paths so the rest of the
    code never has to care where the process was started from.
    """

    project_root: Path
    results_dir: Path = Path("data/results")
    tool_command: list[str] = Field(default=["pahcer", "run"], min_length=1)
    config_file: Path = Path("pahcer_config.toml")
    config_backup_file: Path = Path("pahcer_config.toml.bak")
    best_scores_file: Path = Path("pahcer/best_scores.json")
    summary_dir: Path = Path("pahcer/json")
    scratch_dir: Path = Path("tools/out")
    scratch_backup_dir: Path = Path("tools/out_bak")
    case_output_width: int = Field(default=4, ge=1)

    @model_validator(mode="before")
    @classmethod
    def _resolve_paths(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("project_root") is None:
            return data
        root = Path(data["project_root"]).expanduser().resolve()
        resolved: dict[str, Any] = {**data, "project_root": root}
        for name in _PROJECT_RELATIVE_FIELDS:
            raw = resolved.get(name)
            if raw is None:
                raw = cls.model_fields[name].default
            path = Path(raw).expanduser()
            resolved[name] = path if path.is_absolute() else root / path
        return resolved

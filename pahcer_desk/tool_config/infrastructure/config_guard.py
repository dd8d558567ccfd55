"""ConfigGuard: brackets every run with a backup and restore of pahcer_config.toml."""

import json
import shutil
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import TOMLKitError

from pahcer_desk.tool_config.domain.objective import Objective, relative_score
from pahcer_desk.tool_config.domain.observer import ToolConfigObserver
from pahcer_desk.tool_config.domain.outcome import GuardOutcome
from pahcer_desk.tool_config.domain.tool_config import ToolConfig

type BestScoreTable = dict[int, float]


class ConfigGuard:
    """Reads and mutates the shared tool configuration file.

    Every mutating operation reports a GuardOutcome instead of raising: a run
    should still go ahead with a degraded safety net, and a failed restore must
    not change a run's already-decided outcome.

    Edits go through tomlkit so comments, ordering and unrelated keys survive a
    write byte for byte.
    """

    relative_score = staticmethod(relative_score)

    def __init__(
        self,
        config_path: Path,
        backup_path: Path,
        best_scores_path: Path,
        observer: ToolConfigObserver,
    ) -> None:
        self._config_path = config_path
        self._backup_path = backup_path
        self._best_scores_path = best_scores_path
        self._observer = observer

    @property
    def config_path(self) -> Path:
        return self._config_path

    # ------------------------------------------------------------------
    # Backup / mutate / restore
    # ------------------------------------------------------------------

    def backup(self) -> GuardOutcome:
        """Copy the live config over the backup path, replacing any earlier backup."""
        try:
            shutil.copyfile(self._config_path, self._backup_path)
        except OSError as exc:
            self._observer.config_backup_failed(
                path=str(self._config_path), reason=str(exc)
            )
            return GuardOutcome.failed(f"Failed to back up config: {exc}")
        self._observer.config_backed_up(
            path=str(self._config_path), backup_path=str(self._backup_path)
        )
        return GuardOutcome.ok(f"Config backed up to {self._backup_path}")

    def apply_test_window(self, start_seed: int, count: int) -> GuardOutcome:
        """Rewrite only test.start_seed / test.end_seed to cover ``count`` seeds."""
        end_seed = start_seed + count
        outcome = self.update_config(
            {"test": {"start_seed": start_seed, "end_seed": end_seed}}
        )
        if outcome.succeeded:
            self._observer.config_test_window_applied(
                start_seed=start_seed, end_seed=end_seed
            )
            return GuardOutcome.ok(
                f"Config updated: start_seed={start_seed}, end_seed={end_seed}"
            )
        return outcome

    def restore(self) -> GuardOutcome:
        """Copy the backup back over the live config if a backup exists."""
        if not self._backup_path.exists():
            reason = f"backup not found: {self._backup_path}"
            self._observer.config_restore_failed(
                path=str(self._config_path), reason=reason
            )
            return GuardOutcome.failed(f"Failed to restore config: {reason}")
        try:
            shutil.copyfile(self._backup_path, self._config_path)
        except OSError as exc:
            self._observer.config_restore_failed(
                path=str(self._config_path), reason=str(exc)
            )
            return GuardOutcome.failed(f"Failed to restore config: {exc}")
        self._observer.config_restored(path=str(self._config_path))
        return GuardOutcome.ok("Config restored from backup")

    def update_config(self, changes: dict[str, dict[str, Any]]) -> GuardOutcome:
        """Shallow-merge ``changes`` into the file, one top-level section at a time."""
        try:
            document = tomlkit.parse(self._config_path.read_text(encoding="utf-8"))
            for section_name, values in changes.items():
                section = document.get(section_name)
                if section is None:
                    section = tomlkit.table()
                    document[section_name] = section
                for key, value in values.items():
                    section[key] = value
            self._config_path.write_text(tomlkit.dumps(document), encoding="utf-8")
        except (OSError, TOMLKitError, TypeError) as exc:
            self._observer.config_update_failed(
                path=str(self._config_path), reason=str(exc)
            )
            return GuardOutcome.failed(f"Failed to update config: {exc}")
        return GuardOutcome.ok("Config updated")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read_config(self) -> ToolConfig:
        """Return a typed view of the config; an unreadable file yields an empty view."""
        try:
            document = tomlkit.parse(self._config_path.read_text(encoding="utf-8"))
            return ToolConfig.model_validate(document.unwrap())
        except (OSError, TOMLKitError, ValidationError) as exc:
            self._observer.config_read_failed(
                path=str(self._config_path), reason=str(exc)
            )
            return ToolConfig()

    def objective(self) -> Objective:
        return Objective.parse(self.read_config().problem.objective)

    def best_scores(self) -> BestScoreTable:
        """Read best_scores.json as {seed: score}.

        A missing file is the normal state before the first run and yields {}.
        Entries whose key is not an integer or whose value is not a number are
        dropped.
        """
        try:
            raw = json.loads(self._best_scores_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            self._observer.best_scores_missing(path=str(self._best_scores_path))
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            self._observer.best_scores_invalid(
                path=str(self._best_scores_path), reason=str(exc)
            )
            return {}

        if not isinstance(raw, dict):
            self._observer.best_scores_invalid(
                path=str(self._best_scores_path),
                reason=f"expected an object, got {type(raw).__name__}",
            )
            return {}

        table: BestScoreTable = {}
        for seed_str, score in raw.items():
            try:
                seed = int(seed_str)
            except ValueError:
                continue
            if isinstance(score, bool) or not isinstance(score, int | float):
                continue
            table[seed] = float(score)
        return table

"""ScratchDirectory: moves the tool's output directory aside for the length of a run."""

import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pahcer_desk.process.domain.observer import ProcessObserver
from pahcer_desk.process.infrastructure.errors import ScratchBackupError


class ScratchDirectory:
    """Two-phase backup of a shared scratch directory.

    Phase one renames ``path`` to ``backup_path`` (discarding any stale backup).
    Phase two, run on every exit from ``preserved()``, deletes whatever the
    run left at ``path`` and renames the backup back. When there was nothing to
    back up, the directory the run created is removed so the tree ends up as it
    started.
    """

    def __init__(self, path: Path, backup_path: Path, observer: ProcessObserver) -> None:
        self._path = path
        self._backup_path = backup_path
        self._observer = observer

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def preserved(self, run_id: str) -> Iterator[None]:
        """Back up on entry, restore on exit.

        Raises:
            ScratchBackupError: if the existing directory cannot be moved aside;
                nothing has been changed in that case.
        """
        backed_up = self._backup(run_id)
        try:
            yield
        finally:
            self._restore(run_id, backed_up=backed_up)

    def _backup(self, run_id: str) -> bool:
        if not self._path.exists():
            self._observer.scratch_backup_skipped(run_id=run_id, path=str(self._path))
            return False
        try:
            if self._backup_path.exists():
                shutil.rmtree(self._backup_path)
            self._path.rename(self._backup_path)
        except OSError as exc:
            raise ScratchBackupError(path=self._path, reason=str(exc)) from exc
        self._observer.scratch_backed_up(
            run_id=run_id, path=str(self._path), backup_path=str(self._backup_path)
        )
        return True

    def _restore(self, run_id: str, backed_up: bool) -> None:
        # Restore failures are reported, not raised: the run's outcome is
        # already decided by the time we get here.
        try:
            if self._path.exists():
                shutil.rmtree(self._path)
            if backed_up:
                self._backup_path.rename(self._path)
        except OSError as exc:
            self._observer.scratch_restore_failed(
                run_id=run_id, path=str(self._path), reason=str(exc)
            )
            return
        self._observer.scratch_restored(run_id=run_id, path=str(self._path))

"""Observer port for the results domain."""

from typing import Protocol


class ResultStoreObserver(Protocol):
    def run_saved(self, run_id: str, status: str) -> None: ...

    def run_deleted(self, run_id: str) -> None: ...

    def metadata_invalid(self, run_id: str, reason: str) -> None: ...

    def summary_invalid(self, run_id: str, reason: str) -> None: ...

    def run_load_failed(self, run_id: str, reason: str) -> None: ...

    def status_update_skipped(self, run_id: str, status: str) -> None: ...

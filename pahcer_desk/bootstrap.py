"""Composition root: wires the bounded contexts into a ready-to-use orchestrator."""

from dataclasses import dataclass

from pahcer_desk.execution.application.orchestrator import RunOrchestrator
from pahcer_desk.execution.domain.observer import RunObserver
from pahcer_desk.execution.infrastructure.broadcast_observer import (
    BroadcastRunObserver,
)
from pahcer_desk.execution.infrastructure.observer import StructlogRunObserver
from pahcer_desk.process.infrastructure.observer import StructlogProcessObserver
from pahcer_desk.process.infrastructure.pahcer_runner import PahcerProcessRunner
from pahcer_desk.process.infrastructure.scratch import ScratchDirectory
from pahcer_desk.results.infrastructure.file_store import FileResultStore
from pahcer_desk.results.infrastructure.observer import StructlogResultStoreObserver
from pahcer_desk.scoring.application.reconciler import ScoreReconciler
from pahcer_desk.scoring.infrastructure.observer import StructlogScoringObserver
from pahcer_desk.settings.domain.settings import AppSettings
from pahcer_desk.tool_config.infrastructure.config_guard import ConfigGuard
from pahcer_desk.tool_config.infrastructure.observer import StructlogToolConfigObserver


@dataclass(frozen=True)
class Services:
    settings: AppSettings
    config_guard: ConfigGuard
    reconciler: ScoreReconciler
    store: FileResultStore
    runner: PahcerProcessRunner
    orchestrator: RunOrchestrator


def build_services(
    settings: AppSettings, observers: list[RunObserver] | None = None
) -> Services:
    """Build every service for ``settings``.

    ``observers`` are subscribed to run events next to the structlog observer.
    """
    config_guard = ConfigGuard(
        config_path=settings.config_file,
        backup_path=settings.config_backup_file,
        best_scores_path=settings.best_scores_file,
        observer=StructlogToolConfigObserver(),
    )
    reconciler = ScoreReconciler(
        reference=config_guard, observer=StructlogScoringObserver()
    )
    store = FileResultStore(
        results_dir=settings.results_dir,
        reconciler=reconciler,
        observer=StructlogResultStoreObserver(),
        case_output_width=settings.case_output_width,
    )
    process_observer = StructlogProcessObserver()
    runner = PahcerProcessRunner(
        tool_command=settings.tool_command,
        working_dir=settings.project_root,
        summary_dir=settings.summary_dir,
        scratch=ScratchDirectory(
            path=settings.scratch_dir,
            backup_path=settings.scratch_backup_dir,
            observer=process_observer,
        ),
        store=store,
        observer=process_observer,
        case_output_width=settings.case_output_width,
    )
    broadcast = BroadcastRunObserver(
        observers=[StructlogRunObserver(), *(observers or [])]
    )
    orchestrator = RunOrchestrator(
        config=config_guard,
        runner=runner,
        store=store,
        reconciler=reconciler,
        observer=broadcast,
    )
    return Services(
        settings=settings,
        config_guard=config_guard,
        reconciler=reconciler,
        store=store,
        runner=runner,
        orchestrator=orchestrator,
    )

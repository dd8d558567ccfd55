"""On-disk layout of the results directory.

Layout::

    <results_dir>/<run_id>/
        execution_info.json     run metadata (RunRecord)
        summary.json            copy of pahcer's summary for this run
        case_outputs/
            0000.txt            raw output per seed, zero-padded
"""

from pathlib import Path

METADATA_FILENAME = "execution_info.json"
SUMMARY_FILENAME = "summary.json"
CASE_OUTPUTS_DIRNAME = "case_outputs"


def run_dir(results_dir: Path, run_id: str) -> Path:
    return results_dir / run_id


def metadata_path(results_dir: Path, run_id: str) -> Path:
    return run_dir(results_dir, run_id) / METADATA_FILENAME


def summary_path(results_dir: Path, run_id: str) -> Path:
    return run_dir(results_dir, run_id) / SUMMARY_FILENAME


def case_outputs_dir(results_dir: Path, run_id: str) -> Path:
    return run_dir(results_dir, run_id) / CASE_OUTPUTS_DIRNAME


def case_output_name(seed: int, width: int = 4) -> str:
    """``case_output_name(7) == "0007.txt"``."""
    return f"{seed:0{width}d}.txt"

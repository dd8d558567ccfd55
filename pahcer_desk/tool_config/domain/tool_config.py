"""Typed, read-only view of pahcer_config.toml."""

from pydantic import BaseModel, ConfigDict


class GeneralSection(BaseModel, frozen=True):
    model_config = ConfigDict(extra="allow")

    version: str | None = None


class ProblemSection(BaseModel, frozen=True):
    model_config = ConfigDict(extra="allow")

    problem_name: str | None = None
    objective: str | None = None
    score_regex: str | None = None


class ExecutionSection(BaseModel, frozen=True):
    model_config = ConfigDict(extra="allow")

    start_seed: int | None = None
    end_seed: int | None = None
    threads: int | None = None
    out_dir: str | None = None
    compile_steps: list[object] | None = None
    test_steps: list[object] | None = None


class ToolConfig(BaseModel, frozen=True):
    """The three sections pahcer reads. Unknown keys are kept, not rejected."""

    model_config = ConfigDict(extra="allow")

    general: GeneralSection = GeneralSection()
    problem: ProblemSection = ProblemSection()
    test: ExecutionSection = ExecutionSection()

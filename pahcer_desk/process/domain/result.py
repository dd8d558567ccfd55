"""ProcessResult: how one invocation of the scoring tool ended."""

from pydantic import BaseModel, ConfigDict


class ProcessResult(BaseModel, frozen=True):
    """Outcome of ProcessRunner.execute; failures are data here, never exceptions.

    ``output`` is the combined stdout/stderr text in the order the tool wrote
    it. ``artifact_warnings`` lists artifacts that could not be copied after a
    clean exit.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    exit_code: int | None
    output: str
    elapsed_seconds: float
    error_message: str | None = None
    artifact_warnings: list[str] = []

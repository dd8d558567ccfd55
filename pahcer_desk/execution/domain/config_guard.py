"""ConfigBracket Protocol: the config operations a run is wrapped in."""

from typing import Protocol

from pahcer_desk.tool_config.domain.outcome import GuardOutcome


class ConfigBracket(Protocol):
    def backup(self) -> GuardOutcome: ...

    def apply_test_window(self, start_seed: int, count: int) -> GuardOutcome: ...

    def restore(self) -> GuardOutcome: ...

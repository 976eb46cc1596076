"""Error hierarchy for the watcher conformance harness."""

from __future__ import annotations


class HarnessError(RuntimeError):
    """Base class for every fatal harness failure."""


class ParseError(HarnessError):
    """Raised when an action script line cannot be parsed."""

    def __init__(self, line_number: int, line: str, message: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"line {line_number}: {message} ({line!r})")


class ConfigError(HarnessError):
    """Raised when the harness configuration is unusable."""


class LaunchError(HarnessError):
    """Raised when the watcher cannot be built or spawned."""


class ExecutionError(HarnessError):
    """Raised when an action's filesystem operation fails."""

    def __init__(self, action: object, cause: OSError) -> None:
        self.action = action
        self.cause = cause
        super().__init__(f"{action} failed: {cause}")


class MalformedEventError(HarnessError):
    """Raised when a watcher output line is not ``path,kind``."""

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(f"malformed watcher event {line!r}: expected exactly 'path,kind'")

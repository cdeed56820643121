from __future__ import annotations

from dataclasses import dataclass

from ..registry import DEFAULT_TIMEOUT_MS


@dataclass(frozen=True, slots=True)
class ExecutionRequest:
    """Validated argument vector and options handed to an execution engine.

    Example:
        ```python
        req = ExecutionRequest(argv=("--color=never", "--list"), working_directory="/repo")
        ```
    """

    argv: tuple[str, ...]
    working_directory: str | None = None
    timeout_ms: float = DEFAULT_TIMEOUT_MS


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """Normalized result of one `just` process.

    Example:
        ```python
        out = ExecutionOutcome(stdout="build\n", stderr="", exit_code=0)
        ```
    """

    stdout: str
    stderr: str
    exit_code: int
    timed_out: bool = False

from .engine import ExecutionEngine
from .subprocess_engine import TIMEOUT_EXIT_CODE, SubprocessEngine
from .types import ExecutionOutcome, ExecutionRequest

__all__ = [
    "ExecutionEngine",
    "ExecutionOutcome",
    "ExecutionRequest",
    "SubprocessEngine",
    "TIMEOUT_EXIT_CODE",
]

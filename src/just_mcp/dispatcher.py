from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import InvalidArgumentError, UnknownOperationError
from .execution.engine import ExecutionEngine
from .execution.types import ExecutionOutcome
from .registry import DEFAULT_TIMEOUT_MS, REGISTRY, OperationSpec
from .translator import translate

logger = logging.getLogger(__name__)

NO_OUTPUT_PLACEHOLDER = "Command completed successfully"


@dataclass(frozen=True, slots=True)
class ToolResponse:
    """Text payload returned to the caller, flagged when the call failed.

    Example:
        ```python
        response = ToolResponse(text="build\ntest")
        ```
    """

    text: str
    is_error: bool = False

    @classmethod
    def failure(cls, message: str) -> "ToolResponse":
        """Build an error response from a message.

        Example:
            ```python
            response = ToolResponse.failure("Unknown tool: delete")
            ```
        """
        return cls(text=f"Error: {message}", is_error=True)


def format_outcome(outcome: ExecutionOutcome) -> str:
    """Render an execution outcome as a single text blob.

    Example:
        ```python
        text = format_outcome(ExecutionOutcome(stdout="ok", stderr="", exit_code=2))
        ```
    """
    output = outcome.stdout
    if outcome.stderr:
        output += ("\n" if output else "") + outcome.stderr
    if outcome.exit_code != 0:
        output += f"\n[Exit code: {outcome.exit_code}]"
    return output or NO_OUTPUT_PLACEHOLDER


class Dispatcher:
    """Route tool calls through translation and execution into responses.

    Example:
        ```python
        dispatcher = Dispatcher(SubprocessEngine())
        response = await dispatcher.dispatch("list", {"working_directory": "/repo"})
        ```
    """

    def __init__(
        self,
        engine: ExecutionEngine,
        *,
        registry: Mapping[str, OperationSpec] = REGISTRY,
        default_timeout_ms: float = DEFAULT_TIMEOUT_MS,
    ) -> None:
        """Bind the engine, the tool catalog and the default timeout.

        Example:
            ```python
            dispatcher = Dispatcher(engine, default_timeout_ms=60_000)
            ```
        """
        self._engine = engine
        self._registry = registry
        self._default_timeout_ms = default_timeout_ms

    def operations(self) -> list[OperationSpec]:
        """Return the advertised tools in catalog order.

        Example:
            ```python
            names = [op.name for op in dispatcher.operations()]
            ```
        """
        return list(self._registry.values())

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        """Handle one tool call; never raises.

        Example:
            ```python
            response = await dispatcher.dispatch("run", {"recipe": "build"})
            ```
        """
        try:
            return await self._dispatch(name, arguments)
        except (InvalidArgumentError, UnknownOperationError) as exc:
            return ToolResponse.failure(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while handling tool %r", name)
            return ToolResponse.failure(str(exc) or type(exc).__name__)

    async def _dispatch(self, name: str, arguments: Mapping[str, Any] | None) -> ToolResponse:
        """Translate, execute and format one call, raising on invalid input.

        Example:
            ```python
            response = await dispatcher._dispatch("show", {"recipe": "build"})
            ```
        """
        if name not in self._registry:
            logger.warning("Rejected call to unknown tool %r", name)
            raise UnknownOperationError(name)
        try:
            request = translate(name, arguments, default_timeout_ms=self._default_timeout_ms)
        except InvalidArgumentError as exc:
            logger.info("Rejected %s call: %s", name, exc)
            raise
        outcome = await self._engine.execute(request)
        return ToolResponse(text=format_outcome(outcome))

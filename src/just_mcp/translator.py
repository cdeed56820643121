from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .errors import InvalidArgumentError, RecipeNameProblem, UnknownOperationError
from .execution.types import ExecutionRequest
from .registry import DEFAULT_TIMEOUT_MS

logger = logging.getLogger(__name__)

_RECIPE_NAME_PATTERN = re.compile(r"[a-zA-Z0-9_-]+")


@dataclass(frozen=True, slots=True)
class ToolArguments:
    """Argument bag after type coercion, before recipe validation.

    Example:
        ```python
        parsed = parse_arguments({"recipe": "build", "args": ["--release"]})
        ```
    """

    recipe: Any = None
    args: tuple[str, ...] = ()
    working_directory: str | None = None
    justfile: str | None = None
    timeout_ms: float | None = None


def _optional_str(value: Any) -> str | None:
    """Return `value` when it is a non-empty string, otherwise None.

    Example:
        ```python
        assert _optional_str(42) is None
        ```
    """
    if isinstance(value, str) and value:
        return value
    return None


def _string_items(value: Any) -> tuple[str, ...]:
    """Keep only the string elements of a list or tuple.

    Example:
        ```python
        assert _string_items(["--release", 3]) == ("--release",)
        ```
    """
    if not isinstance(value, (list, tuple)):
        return ()
    kept = tuple(item for item in value if isinstance(item, str))
    if len(kept) != len(value):
        logger.debug("Dropped %d non-string element(s) from 'args'", len(value) - len(kept))
    return kept


def _timeout_ms(value: Any) -> float | None:
    """Return a finite numeric timeout, otherwise None.

    Example:
        ```python
        assert _timeout_ms("100") is None
        ```
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        as_float = float(value)
    except OverflowError:
        return None
    if not math.isfinite(as_float):
        return None
    return value


def parse_arguments(arguments: Mapping[str, Any] | None) -> ToolArguments:
    """Coerce an untyped argument bag into `ToolArguments`.

    Fields of the wrong type are ignored rather than rejected.

    Example:
        ```python
        parsed = parse_arguments({"working_directory": "/repo", "timeout": 1000})
        ```
    """
    if not isinstance(arguments, Mapping):
        arguments = {}
    return ToolArguments(
        recipe=arguments.get("recipe"),
        args=_string_items(arguments.get("args")),
        working_directory=_optional_str(arguments.get("working_directory")),
        justfile=_optional_str(arguments.get("justfile")),
        timeout_ms=_timeout_ms(arguments.get("timeout")),
    )


def validate_recipe_name(value: Any) -> str:
    """Return `value` if it is a safe recipe name, otherwise raise.

    Example:
        ```python
        recipe = validate_recipe_name("build")
        ```
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(
            "Recipe name must be a non-empty string",
            field="recipe",
            reason=RecipeNameProblem.EMPTY,
        )
    if value.startswith("-"):
        raise InvalidArgumentError(
            "Recipe name cannot start with '-'",
            field="recipe",
            reason=RecipeNameProblem.LEADING_DASH,
        )
    if not _RECIPE_NAME_PATTERN.fullmatch(value):
        raise InvalidArgumentError(
            "Recipe name contains invalid characters",
            field="recipe",
            reason=RecipeNameProblem.INVALID_CHARACTERS,
        )
    return value


def base_args(justfile: str | None = None) -> list[str]:
    """Return the arguments every `just` invocation starts with.

    Example:
        ```python
        assert base_args("ci.just") == ["--color=never", "--justfile", "ci.just"]
        ```
    """
    args = ["--color=never"]
    if justfile:
        args.extend(["--justfile", justfile])
    return args


def _list_argv(parsed: ToolArguments) -> list[str]:
    """Build argv for the `list` tool.

    Example:
        ```python
        argv = _list_argv(ToolArguments())
        ```
    """
    return [*base_args(parsed.justfile), "--list"]


def _show_argv(parsed: ToolArguments) -> list[str]:
    """Build argv for the `show` tool.

    Example:
        ```python
        argv = _show_argv(ToolArguments(recipe="build"))
        ```
    """
    return [*base_args(parsed.justfile), "--show", validate_recipe_name(parsed.recipe)]


def _run_argv(parsed: ToolArguments) -> list[str]:
    """Build argv for the `run` tool.

    Example:
        ```python
        argv = _run_argv(ToolArguments(recipe="test", args=("-k", "smoke")))
        ```
    """
    return [*base_args(parsed.justfile), validate_recipe_name(parsed.recipe), *parsed.args]


_ARGV_BUILDERS: Mapping[str, Callable[[ToolArguments], list[str]]] = {
    "list": _list_argv,
    "show": _show_argv,
    "run": _run_argv,
}
# Only `run` advertises a `timeout` argument.
_TIMEOUT_OPERATIONS = frozenset({"run"})


def translate(
    operation: str,
    arguments: Mapping[str, Any] | None,
    *,
    default_timeout_ms: float = DEFAULT_TIMEOUT_MS,
) -> ExecutionRequest:
    """Validate a tool call and translate it into an `ExecutionRequest`.

    Example:
        ```python
        req = translate("run", {"recipe": "build", "args": ["--release"], "working_directory": "/repo"})
        ```
    """
    builder = _ARGV_BUILDERS.get(operation)
    if builder is None:
        raise UnknownOperationError(operation)
    parsed = parse_arguments(arguments)
    argv = builder(parsed)
    timeout_ms = default_timeout_ms
    if operation in _TIMEOUT_OPERATIONS and parsed.timeout_ms is not None:
        timeout_ms = parsed.timeout_ms
    return ExecutionRequest(
        argv=tuple(argv),
        working_directory=parsed.working_directory,
        timeout_ms=timeout_ms,
    )

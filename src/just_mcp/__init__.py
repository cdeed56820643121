from .dispatcher import Dispatcher, ToolResponse, format_outcome
from .errors import InvalidArgumentError, RecipeNameProblem, UnknownOperationError
from .execution import ExecutionOutcome, ExecutionRequest, SubprocessEngine
from .registry import DEFAULT_TIMEOUT_MS, REGISTRY, OperationSpec
from .settings import ServerSettings
from .translator import translate, validate_recipe_name

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "Dispatcher",
    "ExecutionOutcome",
    "ExecutionRequest",
    "InvalidArgumentError",
    "OperationSpec",
    "REGISTRY",
    "RecipeNameProblem",
    "ServerSettings",
    "SubprocessEngine",
    "ToolResponse",
    "UnknownOperationError",
    "format_outcome",
    "translate",
    "validate_recipe_name",
]

"""Query engine contract and loader.

The engine is an external collaborator consumed as three pure functions:

    parse(document)            -> parsed query, raises on structural errors
    validate(parsed)           -> parsed query, raises on semantic errors
    evaluate(parsed, records)  -> mapping (or pydantic model) result

Any object or module with those attributes qualifies. Which one is used is
decided by a "module:attribute" path (or a bare module path).
"""

import importlib
import os
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from playground.query.exceptions import EngineNotConfiguredError
from playground.utils.logger import LoggerManager

logger = LoggerManager.get_logger(__name__)

ENGINE_ENV_VAR = "PLAYGROUND_ENGINE"
ENGINE_OPERATIONS = ("parse", "validate", "evaluate")


@runtime_checkable
class QueryEngine(Protocol):
    def parse(self, document: Any) -> Any: ...

    def validate(self, parsed: Any) -> Any: ...

    def evaluate(self, parsed: Any, records: Sequence[Any]) -> Any: ...


def load_engine(path: str) -> QueryEngine:
    """Import the engine named by `path`.

    Args:
        path: "package.module:attribute" or "package.module"

    Returns:
        The engine object

    Raises:
        EngineNotConfiguredError: If the import fails or an operation is missing
    """
    module_name, _, attribute = path.partition(":")
    try:
        target = importlib.import_module(module_name)
        if attribute:
            for part in attribute.split("."):
                target = getattr(target, part)
    except (ImportError, AttributeError) as e:
        raise EngineNotConfiguredError.from_import_error(path, e) from e

    missing = [op for op in ENGINE_OPERATIONS if not callable(getattr(target, op, None))]
    if missing:
        raise EngineNotConfiguredError.from_missing_operations(path, missing)

    logger.info("engine.loaded", extra={"extra_data": {"path": path}})
    return target


def resolve_engine(config_path: Optional[str] = None) -> QueryEngine:
    """Load the engine from PLAYGROUND_ENGINE, falling back to the config value.

    Raises:
        EngineNotConfiguredError: If neither names an engine
    """
    path = os.environ.get(ENGINE_ENV_VAR) or config_path
    if not path:
        raise EngineNotConfiguredError.from_missing_path()
    return load_engine(path)

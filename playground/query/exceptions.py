"""Custom exceptions for the evaluation pipeline.

Every failure while turning the two documents into an EvaluationResult is an
`EvaluationError`. The scheduler catches that base class, shows its message
and clears the result. `EngineNotConfiguredError` is a setup failure and is
raised to the caller instead.
"""

import json


class EvaluationError(Exception):
    """Base class for failures while evaluating the documents.

    Attributes:
        message: Human-readable message shown in place of the result
        original_error: Underlying exception, if any
    """

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class DocumentSyntaxError(EvaluationError):
    """A document is not valid JSON."""

    def __init__(self, message: str, document: str, original_error: Exception = None):
        super().__init__(message, original_error=original_error)
        self.document = document

    @classmethod
    def from_decode_error(cls, document: str, error: json.JSONDecodeError) -> "DocumentSyntaxError":
        """Create error for a JSON decode failure in `document` ("query" or "records")."""
        message = f"Invalid JSON in {document} document: {error.msg} (line {error.lineno}, column {error.colno})"
        return cls(message, document=document, original_error=error)

    @classmethod
    def from_nesting_error(cls, document: str, error: RecursionError) -> "DocumentSyntaxError":
        """Create error for a document nested too deeply to decode."""
        message = f"Invalid JSON in {document} document: nesting too deep to decode"
        return cls(message, document=document, original_error=error)


class ShapeError(EvaluationError):
    """The records document is valid JSON but not an array."""

    @classmethod
    def from_value(cls, value) -> "ShapeError":
        return cls(f"Credentials must be an array, got {type(value).__name__}")


class QueryStructureError(EvaluationError):
    """The engine's structural parse rejected the query document."""

    @classmethod
    def from_engine_error(cls, error: Exception) -> "QueryStructureError":
        return cls(str(error) or type(error).__name__, original_error=error)


class QuerySemanticError(EvaluationError):
    """The engine's semantic validation rejected the parsed query
    (e.g. a credential set referencing an unknown credential query id)."""

    @classmethod
    def from_engine_error(cls, error: Exception) -> "QuerySemanticError":
        return cls(str(error) or type(error).__name__, original_error=error)


class QueryEvaluationError(EvaluationError):
    """The engine failed while evaluating a valid query, or returned a
    result the playground cannot read."""

    @classmethod
    def from_engine_error(cls, error: Exception) -> "QueryEvaluationError":
        return cls(str(error) or type(error).__name__, original_error=error)

    @classmethod
    def from_invalid_result(cls, error: Exception) -> "QueryEvaluationError":
        message = (
            f"Engine returned an unreadable result: {type(error).__name__}\n\n"
            f"Details: {error}"
        )
        return cls(message, original_error=error)


class EngineNotConfiguredError(Exception):
    """No usable query engine could be loaded."""

    @classmethod
    def from_missing_path(cls) -> "EngineNotConfiguredError":
        message = (
            "No query engine configured.\n\n"
            "To fix this issue:\n"
            "1. Set PLAYGROUND_ENGINE to a 'module:attribute' path:\n"
            "   export PLAYGROUND_ENGINE='my_engine:DcqlQuery'\n\n"
            "2. Or set engine.path in config/playground.yaml\n\n"
            "The target must expose parse(), validate() and evaluate()."
        )
        return cls(message)

    @classmethod
    def from_import_error(cls, path: str, error: Exception) -> "EngineNotConfiguredError":
        return cls(f"Could not load query engine '{path}': {type(error).__name__}: {error}")

    @classmethod
    def from_missing_operations(cls, path: str, missing) -> "EngineNotConfiguredError":
        return cls(
            f"Query engine '{path}' does not expose: {', '.join(sorted(missing))}"
        )

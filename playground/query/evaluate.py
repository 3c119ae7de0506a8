"""Evaluation procedure: two document strings -> EvaluationResult.

Steps, each mapped onto one error class:
1. JSON-decode the query document             (DocumentSyntaxError)
2. JSON-decode the records document           (DocumentSyntaxError)
3. Require the records to be an array         (ShapeError)
4. Engine structural parse                    (QueryStructureError)
5. Engine semantic validation                 (QuerySemanticError)
6. Engine evaluation, echoed records dropped  (QueryEvaluationError)
"""

import json
from collections.abc import Mapping
from typing import Any, Dict, NamedTuple

from pydantic import ValidationError

from playground.query.engine import QueryEngine
from playground.query.exceptions import (
    DocumentSyntaxError,
    ShapeError,
    QueryStructureError,
    QuerySemanticError,
    QueryEvaluationError,
)
from playground.schemas import EvaluationResult

# The engine echoes the input records under this key; they duplicate the
# records document and can be large.
ECHOED_RECORDS_KEY = "credentials"


class EvaluationOutcome(NamedTuple):
    result: EvaluationResult
    payload: Dict[str, Any]
    result_json: str


def decode_document(text: str, document: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentSyntaxError.from_decode_error(document, e) from e
    except RecursionError as e:
        raise DocumentSyntaxError.from_nesting_error(document, e) from e


def result_to_payload(raw: Any) -> Dict[str, Any]:
    """Plain dict of the engine result without the echoed records."""
    if hasattr(raw, "model_dump"):
        raw = raw.model_dump(mode="json")
    if not isinstance(raw, Mapping):
        raise QueryEvaluationError.from_invalid_result(
            TypeError(f"expected a mapping, got {type(raw).__name__}")
        )
    return {key: value for key, value in raw.items() if key != ECHOED_RECORDS_KEY}


def evaluate_documents(query_text: str, records_text: str, engine: QueryEngine) -> EvaluationOutcome:
    """Evaluate the query document against the records document.

    Args:
        query_text: Query document (JSON object)
        records_text: Records document (JSON array)
        engine: Query engine collaborator

    Returns:
        EvaluationOutcome with the validated result and its plain payload

    Raises:
        EvaluationError: Subclass naming the step that failed
    """
    query_obj = decode_document(query_text, "query")
    records = decode_document(records_text, "records")
    if not isinstance(records, list):
        raise ShapeError.from_value(records)

    # Engine errors are arbitrary exception types; each step maps onto one class
    try:
        parsed = engine.parse(query_obj)
    except Exception as e:
        raise QueryStructureError.from_engine_error(e) from e

    try:
        validated = engine.validate(parsed)
    except Exception as e:
        raise QuerySemanticError.from_engine_error(e) from e
    # Some engines validate in place and return None
    if validated is None:
        validated = parsed

    try:
        raw = engine.evaluate(validated, records)
    except Exception as e:
        raise QueryEvaluationError.from_engine_error(e) from e

    payload = result_to_payload(raw)
    try:
        result = EvaluationResult.model_validate(payload)
    except ValidationError as e:
        raise QueryEvaluationError.from_invalid_result(e) from e

    # Echoed engine output may hold values json cannot encode (dates, bytes)
    result_json = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    return EvaluationOutcome(result=result, payload=payload, result_json=result_json)

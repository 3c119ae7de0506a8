"""Tests for evaluate_documents.

Each step of the pipeline fails with its own error class, and the echoed
records never reach the result.
"""

from datetime import date
import json

import pytest

from playground.query.evaluate import evaluate_documents, result_to_payload, ECHOED_RECORDS_KEY
from playground.query.exceptions import (
    EvaluationError,
    DocumentSyntaxError,
    ShapeError,
    QueryStructureError,
    QuerySemanticError,
    QueryEvaluationError,
)
from playground.schemas import EvaluationResult


class TestErrorTaxonomy:
    """Tests mapping each failing step onto one error class."""

    def test_invalid_query_json(self, fake_engine, records_text):
        with pytest.raises(DocumentSyntaxError) as exc_info:
            evaluate_documents("{not json", records_text, fake_engine)

        assert exc_info.value.document == "query"
        assert "query document" in exc_info.value.message
        assert isinstance(exc_info.value.original_error, json.JSONDecodeError)

    def test_invalid_records_json(self, fake_engine, query_text):
        with pytest.raises(DocumentSyntaxError) as exc_info:
            evaluate_documents(query_text, "[{", fake_engine)

        assert exc_info.value.document == "records"

    def test_records_nested_too_deep(self, fake_engine, query_text):
        with pytest.raises(DocumentSyntaxError) as exc_info:
            evaluate_documents(query_text, "[" * 100000 + "]" * 100000, fake_engine)

        assert exc_info.value.document == "records"
        assert "nesting too deep" in exc_info.value.message
        assert isinstance(exc_info.value.original_error, RecursionError)

    @pytest.mark.parametrize("records", ["{}", "42", '"text"', "null"])
    def test_records_must_be_array(self, fake_engine, query_text, records):
        with pytest.raises(ShapeError) as exc_info:
            evaluate_documents(query_text, records, fake_engine)

        assert exc_info.value.message.startswith("Credentials must be an array")
        assert fake_engine.evaluations == []

    def test_structural_error(self, fake_engine, records_text):
        with pytest.raises(QueryStructureError) as exc_info:
            evaluate_documents('{"credentials": "nope"}', records_text, fake_engine)

        assert "credentials" in exc_info.value.message

    def test_semantic_error(self, engine_factory, query_text, records_text):
        engine = engine_factory(validate_error=ValueError("duplicate credential query id"))

        with pytest.raises(QuerySemanticError, match="duplicate credential query id"):
            evaluate_documents(query_text, records_text, engine)

    def test_engine_evaluation_failure(self, engine_factory, query_text, records_text):
        engine = engine_factory(evaluate_error=RuntimeError("boom"))

        with pytest.raises(QueryEvaluationError, match="boom"):
            evaluate_documents(query_text, records_text, engine)

    def test_empty_engine_message_falls_back_to_type_name(self, engine_factory, query_text, records_text):
        engine = engine_factory(parse_error=KeyError())

        with pytest.raises(QueryStructureError) as exc_info:
            evaluate_documents(query_text, records_text, engine)

        assert exc_info.value.message == "KeyError"

    def test_unreadable_result(self, engine_factory, query_text, records_text):
        engine = engine_factory(result={"credential_matches": {}})

        with pytest.raises(QueryEvaluationError, match="unreadable result"):
            evaluate_documents(query_text, records_text, engine)

    def test_all_errors_share_base_class(self):
        for cls in (DocumentSyntaxError, ShapeError, QueryStructureError, QuerySemanticError, QueryEvaluationError):
            assert issubclass(cls, EvaluationError)


class TestSuccess:
    """Tests for a successful evaluation."""

    def test_returns_validated_result(self, fake_engine, query_text, records_text):
        outcome = evaluate_documents(query_text, records_text, fake_engine)

        assert isinstance(outcome.result, EvaluationResult)
        assert outcome.result.can_be_satisfied is True
        match = outcome.result.credential_matches["mvrc_credential"]
        assert [c.input_credential_index for c in match.valid_credentials] == [0]
        assert [c.input_credential_index for c in match.failed_credentials] == [1]

    def test_echoed_records_are_stripped(self, fake_engine, query_text, records_text):
        outcome = evaluate_documents(query_text, records_text, fake_engine)

        assert ECHOED_RECORDS_KEY not in outcome.payload
        assert ECHOED_RECORDS_KEY not in outcome.result.model_dump()

    def test_raw_json_stringifies_non_json_values(self, engine_factory, query_text, records_text):
        engine = engine_factory(result={"can_be_satisfied": True, "issued": date(2024, 1, 1)})

        outcome = evaluate_documents(query_text, records_text, engine)

        assert json.loads(outcome.result_json)["issued"] == "2024-01-01"

    def test_engine_receives_decoded_records(self, fake_engine, query_text, records_text):
        evaluate_documents(query_text, records_text, fake_engine)

        _, records = fake_engine.evaluations[0]
        assert records == json.loads(records_text)

    def test_validate_returning_none_keeps_parsed_query(self, fake_engine, query_text, records_text):
        class InPlaceEngine(type(fake_engine)):
            def validate(self, parsed):
                super().validate(parsed)
                return None

        outcome = evaluate_documents(query_text, records_text, InPlaceEngine())
        assert "mvrc_credential" in outcome.result.credential_matches


class TestResultToPayload:
    """Tests for engine result normalisation."""

    def test_accepts_pydantic_models(self):
        result = EvaluationResult(can_be_satisfied=False)
        assert result_to_payload(result)["can_be_satisfied"] is False

    def test_rejects_non_mapping(self):
        with pytest.raises(QueryEvaluationError):
            result_to_payload(["not", "a", "mapping"])

    def test_does_not_mutate_engine_result(self):
        raw = {"can_be_satisfied": True, "credentials": [1]}
        result_to_payload(raw)
        assert raw == {"can_be_satisfied": True, "credentials": [1]}

"""Tests for CredentialSet and QueryDocument."""

import pytest
from pydantic import ValidationError

from playground.schemas import CredentialSet, QueryDocument


class TestCredentialSet:
    """Tests for CredentialSet validation."""

    def test_defaults(self):
        credential_set = CredentialSet()

        assert credential_set.options == [[]]
        assert credential_set.required is True

    def test_options_must_be_lists(self):
        with pytest.raises(ValidationError):
            CredentialSet(options=["mvrc_credential"])

    def test_dangling_ids_accepted(self):
        """Unknown ids are the engine's validation concern."""
        assert CredentialSet(options=[["not_selected"]]).options == [["not_selected"]]

    def test_frozen(self):
        with pytest.raises(ValidationError):
            CredentialSet().required = False


class TestQueryDocument:
    """Tests for the query document payload."""

    def test_payload_without_sets(self):
        document = QueryDocument(credentials=[{"id": "a"}])
        assert document.to_payload() == {"credentials": [{"id": "a"}]}

    def test_payload_with_sets(self):
        document = QueryDocument(
            credentials=[{"id": "a"}],
            credential_sets=[CredentialSet(options=[["a"]], required=False)],
        )

        assert document.to_payload() == {
            "credentials": [{"id": "a"}],
            "credential_sets": [{"options": [["a"]], "required": False}],
        }

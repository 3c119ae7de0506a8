"""Tests for the sample catalogs."""

from playground.catalog import (
    DEFAULT_QUERY_INDICES,
    DEFAULT_RECORD_INDICES,
    SAMPLE_CREDENTIALS,
    SAMPLE_QUERIES,
)


class TestSampleCatalogs:
    """Tests for catalog contents and access."""

    def test_query_ids_are_unique(self):
        ids = [entry.document["id"] for entry in SAMPLE_QUERIES]

        assert ids == ["mvrc_credential", "dl_credential", "identity_credential", "degree_credential"]
        assert len(set(ids)) == len(ids)

    def test_every_credential_has_a_format(self):
        assert all("credential_format" in entry.document for entry in SAMPLE_CREDENTIALS)

    def test_defaults(self):
        assert DEFAULT_QUERY_INDICES == (0,)
        assert DEFAULT_RECORD_INDICES == (0, 1, 2, 3)

    def test_label_for(self):
        assert SAMPLE_CREDENTIALS.label_for(0) == SAMPLE_CREDENTIALS.names()[0]
        assert SAMPLE_CREDENTIALS.label_for(4) is None
        assert SAMPLE_CREDENTIALS.label_for(-1) is None

    def test_documents_by_indices(self):
        documents = SAMPLE_QUERIES.documents([3, 0])
        assert [d["id"] for d in documents] == ["degree_credential", "mvrc_credential"]

    def test_contains_index(self):
        assert SAMPLE_QUERIES.contains_index(3)
        assert not SAMPLE_QUERIES.contains_index(len(SAMPLE_QUERIES))

    def test_documents_are_independent_copies(self):
        identity, degree = SAMPLE_CREDENTIALS.documents([2, 3])

        identity["claims"]["address"]["locality"] = "Edited"
        degree["claims"]["nationalities"].append("Vogon")

        assert degree["claims"]["address"]["locality"] == "Milliways"
        assert SAMPLE_CREDENTIALS[2].document["claims"]["address"]["locality"] == "Milliways"
        assert SAMPLE_CREDENTIALS.documents([3])[0]["claims"]["nationalities"] == ["British", "Betelgeusian"]

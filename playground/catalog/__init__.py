"""Static sample catalogs for seeding the playground."""

from playground.catalog.samples import (
    CatalogEntry,
    FixtureCatalog,
    SAMPLE_QUERIES,
    SAMPLE_CREDENTIALS,
    DEFAULT_QUERY_INDICES,
    DEFAULT_RECORD_INDICES,
)

__all__ = [
    "CatalogEntry",
    "FixtureCatalog",
    "SAMPLE_QUERIES",
    "SAMPLE_CREDENTIALS",
    "DEFAULT_QUERY_INDICES",
    "DEFAULT_RECORD_INDICES",
]

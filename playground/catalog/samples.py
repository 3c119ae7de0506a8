"""Sample catalogs: credential query fixtures and credential fixtures.

Both catalogs are static and ordered. Selection state stores indices into
them, and the result tree uses the credential catalog to label records.
"""

import copy
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict


class CatalogEntry(BaseModel):
    """A named document fragment."""
    model_config = ConfigDict(frozen=True)

    name: str
    document: Dict[str, Any]


class FixtureCatalog:
    """Ordered, read-only list of catalog entries addressed by index."""

    def __init__(self, entries: Sequence[CatalogEntry]):
        self._entries = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> CatalogEntry:
        return self._entries[index]

    def __iter__(self):
        return iter(self._entries)

    def contains_index(self, index: int) -> bool:
        return 0 <= index < len(self._entries)

    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]

    def label_for(self, index: int) -> Optional[str]:
        """Entry name, or None when the index has no entry."""
        if self.contains_index(index):
            return self._entries[index].name
        return None

    def documents(self, indices: Sequence[int]) -> List[Dict[str, Any]]:
        """Independent copies of the entry documents; entries share nested fixtures."""
        return [copy.deepcopy(self._entries[i].document) for i in indices]


SAMPLE_QUERIES = FixtureCatalog([
    CatalogEntry(
        name="Basic mVRC Query (mDOC)",
        document={
            "id": "mvrc_credential",
            "format": "mso_mdoc",
            "meta": {"doctype_value": "org.iso.7367.1.mVRC"},
            "require_cryptographic_holder_binding": True,
            "claims": [
                {"path": ["org.iso.7367.1", "vehicle_holder"], "intent_to_retain": False},
                {"path": ["org.iso.18013.5.1", "first_name"], "intent_to_retain": True},
            ],
            "trusted_authorities": [
                {"type": "aki", "values": ["one", "two"]},
            ],
        },
    ),
    CatalogEntry(
        name="Driver License Query (mDOC)",
        document={
            "id": "dl_credential",
            "format": "mso_mdoc",
            "meta": {"doctype_value": "org.iso.18013.5.1.mDL"},
            "claims": [
                {"path": ["org.iso.18013.5.1", "family_name"], "intent_to_retain": True},
                {"path": ["org.iso.18013.5.1", "driving_privileges"], "intent_to_retain": False},
            ],
            "trusted_authorities": [
                {"type": "openid_federation", "values": ["https://federation.com"]},
            ],
        },
    ),
    CatalogEntry(
        name="Identity Credential Query (SD-JWT VC)",
        document={
            "id": "identity_credential",
            "format": "vc+sd-jwt",
            "meta": {
                "vct_values": ["https://credentials.example.com/identity_credential"],
            },
            "claims": [
                {"path": ["last_name"], "intent_to_retain": True},
                {"path": ["first_name"], "intent_to_retain": True},
                {"path": ["address", "street_address"], "intent_to_retain": False},
            ],
            "require_cryptographic_holder_binding": True,
        },
    ),
    CatalogEntry(
        name="University Degree Query (W3C)",
        document={
            "id": "degree_credential",
            "format": "ldp_vc",
            "meta": {
                "type_values": [
                    [
                        "https://example.org/examples#AlumniCredential",
                        "https://example.org/examples#BachelorDegree",
                    ],
                    [
                        "https://www.w3.org/2018/credentials#VerifiableCredential",
                        "https://example.org/examples#UniversityDegreeCredential",
                    ],
                ],
            },
            "claims": [
                {"path": ["last_name"], "intent_to_retain": True},
                {"path": ["first_name"], "intent_to_retain": True},
                {"path": ["address", "street_address"], "intent_to_retain": False},
            ],
            "require_cryptographic_holder_binding": True,
        },
    ),
])

_DENT_CLAIMS = {
    "first_name": "Arthur",
    "last_name": "Dent",
    "address": {
        "street_address": "42 Market Street",
        "locality": "Milliways",
        "postal_code": "12345",
    },
    "degrees": [
        {"type": "Bachelor of Science", "university": "University of Betelgeuse"},
        {"type": "Master of Science", "university": "University of Betelgeuse"},
    ],
    "nationalities": ["British", "Betelgeusian"],
}

SAMPLE_CREDENTIALS = FixtureCatalog([
    CatalogEntry(
        name="Vehicle Registration (mVRC)",
        document={
            "credential_format": "mso_mdoc",
            "doctype": "org.iso.7367.1.mVRC",
            "namespaces": {
                "org.iso.7367.1": {
                    "vehicle_holder": "Martin Auer",
                    "non_disclosed": "secret",
                },
                "org.iso.18013.5.1": {"first_name": "Martin Auer"},
            },
            "authority": {"type": "aki", "value": "one"},
            "cryptographic_holder_binding": True,
        },
    ),
    CatalogEntry(
        name="Driver License (mDL)",
        document={
            "credential_format": "mso_mdoc",
            "doctype": "org.iso.18013.5.1.mDL",
            "namespaces": {
                "org.iso.18013.5.1": {
                    "given_name": "Jake",
                    "family_name": "Jakeson",
                    "driving_privileges": [{"code": "B"}, {"code": "A"}],
                },
            },
            "authority": {"type": "openid_federation", "value": "https://federation.com"},
            "cryptographic_holder_binding": True,
        },
    ),
    CatalogEntry(
        name="Identity Credential (SD-JWT VC)",
        document={
            "credential_format": "vc+sd-jwt",
            "vct": "https://credentials.example.com/identity_credential",
            "claims": _DENT_CLAIMS,
            "cryptographic_holder_binding": True,
        },
    ),
    CatalogEntry(
        name="University Degree (W3C VC)",
        document={
            "credential_format": "ldp_vc",
            "type": [
                "https://www.w3.org/2018/credentials#VerifiableCredential",
                "https://example.org/examples#AlumniCredential",
                "https://example.org/examples#BachelorDegree",
            ],
            "claims": _DENT_CLAIMS,
            "cryptographic_holder_binding": True,
        },
    ),
])

DEFAULT_QUERY_INDICES = (0,)
DEFAULT_RECORD_INDICES = tuple(range(len(SAMPLE_CREDENTIALS)))

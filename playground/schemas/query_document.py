"""Query document Pydantic models.

The playground only builds the outer envelope of a query document: the
ordered credential queries taken from the sample catalog, and the optional
user-defined credential sets. Credential queries themselves stay opaque
mappings; their structure belongs to the engine.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CredentialSet(BaseModel):
    """A group constraint over credential query ids.

    At least one option (a combination of credential query ids) must be
    satisfiable. Dangling ids are reported by the engine's validation step,
    not here.
    """
    model_config = ConfigDict(frozen=True)

    options: List[List[str]] = Field(default_factory=lambda: [[]])
    required: bool = True

    @field_validator('options')
    @classmethod
    def validate_options(cls, v):
        """Options must be a list of id lists."""
        if not all(isinstance(option, list) for option in v):
            raise ValueError("credential set options must be lists of credential ids")
        return v


class QueryDocument(BaseModel):
    """Envelope serialized into the query editor buffer."""
    credentials: List[Dict[str, Any]] = Field(default_factory=list)
    credential_sets: List[CredentialSet] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Plain dict with `credential_sets` only when at least one exists."""
        payload: Dict[str, Any] = {"credentials": self.credentials}
        if self.credential_sets:
            payload["credential_sets"] = [s.model_dump() for s in self.credential_sets]
        return payload

"""Request and response models for FastAPI endpoints.

These Pydantic models define the API contract between clients and the server.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from playground.schemas import CredentialSet, ResultTree


class SampleInfo(BaseModel):
    """One catalog entry as listed by /samples."""

    index: int
    name: str
    credential_query_id: Optional[str] = None


class SamplesResponse(BaseModel):
    queries: List[SampleInfo]
    credentials: List[SampleInfo]


class DocumentsRequest(BaseModel):
    """Request to /documents endpoint.

    Attributes:
        query_indices: Selected query samples (order does not matter)
        record_indices: Selected credential samples; all when omitted
        credential_sets: User-defined credential sets
    """

    query_indices: List[int] = Field(default_factory=lambda: [0])
    record_indices: Optional[List[int]] = Field(
        None, description="Credential sample indices (all when omitted)"
    )
    credential_sets: List[CredentialSet] = Field(default_factory=list)


class DocumentsResponse(BaseModel):
    query_document: str
    records_document: str
    available_credential_ids: List[str]


class EvaluateRequest(BaseModel):
    """Request to /evaluate endpoint.

    Attributes:
        query_document: Query document text (JSON object)
        records_document: Credentials document text (JSON array)
    """

    query_document: str = Field(..., description="Query document JSON text")
    records_document: str = Field(..., description="Credentials document JSON text")


class EvaluateResponse(BaseModel):
    """Response from /evaluate endpoint.

    Exactly one of (result, tree) or error is populated.

    Attributes:
        success: Whether evaluation settled without error
        result: Engine result without the echoed credentials
        result_json: Pretty JSON of result ("[]" on error)
        tree: Display model
        error: Error message if success=False
        error_type: Error class name if success=False
    """

    success: bool = Field(..., description="Whether evaluation succeeded")
    result: Optional[Dict[str, Any]] = None
    result_json: str = "[]"
    tree: Optional[ResultTree] = None
    error: Optional[str] = None
    error_type: Optional[str] = None


class HealthResponse(BaseModel):
    """Response from /health endpoint.

    Attributes:
        status: "healthy" when an engine is loaded, "degraded" otherwise
        engine_loaded: Whether a query engine is available
    """

    status: str = Field(..., description="Overall health status")
    engine_loaded: bool = Field(..., description="Query engine availability")

"""FastAPI application exposing the playground pipeline over HTTP.

This module provides the HTTP layer that:
- Lists the sample catalogs (/samples)
- Builds documents from a sample selection (/documents)
- Evaluates a document pair and returns result, display tree or error (/evaluate)

Each request is evaluated immediately; debouncing is the client's concern.

Run with: uvicorn app.api.main:app --reload
"""

from typing import Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from app.api.models import (
    DocumentsRequest,
    DocumentsResponse,
    EvaluateRequest,
    EvaluateResponse,
    HealthResponse,
    SampleInfo,
    SamplesResponse,
)
from playground.catalog import SAMPLE_QUERIES, SAMPLE_CREDENTIALS
from playground.query import (
    EngineNotConfiguredError,
    EvaluationScheduler,
    QueryEngine,
    build_result_tree,
    resolve_engine,
)
from playground.session import SelectionManager, render_query_document, render_records_document
from playground.utils.config_loader import load_config
from playground.utils.logger import LoggerManager

logger = LoggerManager.get_logger(__name__)

config = load_config()

app = FastAPI(
    title="DCQL Playground API",
    description="Evaluate DCQL queries against credentials and inspect the outcome",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get("api.cors_origins", ["*"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global state (initialized on startup)
engine: Optional[QueryEngine] = None


def get_engine() -> QueryEngine:
    """Get the query engine.

    Raises:
        HTTPException: If no engine is configured
    """
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Query engine not configured (set PLAYGROUND_ENGINE)",
        )
    return engine


@app.on_event("startup")
async def startup_event():
    """Load the query engine."""
    global engine

    try:
        engine = resolve_engine(config.get("engine.path"))
    except EngineNotConfiguredError as e:
        engine = None
        logger.warning("api.engine_unavailable", extra={"extra_data": {"error": str(e)}})

    logger.info("api.started", extra={"extra_data": {"engine_loaded": engine is not None}})


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    loaded = engine is not None
    return HealthResponse(status="healthy" if loaded else "degraded", engine_loaded=loaded)


@app.get("/samples", response_model=SamplesResponse)
async def list_samples():
    """List the sample queries and credentials."""
    return SamplesResponse(
        queries=[
            SampleInfo(index=i, name=entry.name, credential_query_id=entry.document.get("id"))
            for i, entry in enumerate(SAMPLE_QUERIES)
        ],
        credentials=[
            SampleInfo(index=i, name=entry.name)
            for i, entry in enumerate(SAMPLE_CREDENTIALS)
        ],
    )


@app.post("/documents", response_model=DocumentsResponse)
async def build_documents(request: DocumentsRequest):
    """Generate the query and credentials documents for a sample selection.

    Raises:
        HTTPException: 400 if an index is outside its catalog
    """
    selection = SelectionManager()
    try:
        selection.select(request.query_indices, request.record_indices)
    except IndexError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    selection.set_credential_sets(request.credential_sets)
    return DocumentsResponse(
        query_document=render_query_document(selection.state),
        records_document=render_records_document(selection.state),
        available_credential_ids=selection.available_credential_ids(),
    )


@app.post("/evaluate", response_model=EvaluateResponse)
def evaluate(request: EvaluateRequest):
    """Evaluate a document pair.

    Evaluation errors are part of the normal response (success=False) so
    the client can show the single message in place of the result.
    """
    scheduler = EvaluationScheduler(get_engine())
    settlement = scheduler.mount(request.query_document, request.records_document)

    if not settlement.ok:
        return EvaluateResponse(
            success=False,
            error=settlement.error,
            error_type=settlement.error_type,
        )

    return EvaluateResponse(
        success=True,
        result=settlement.result.model_dump(mode="json"),
        result_json=settlement.result_json,
        tree=build_result_tree(settlement.result),
    )

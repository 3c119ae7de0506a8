"""Query module - live evaluation of the playground documents.

- evaluate_documents: (query text, records text) -> EvaluationResult
- EvaluationScheduler: debounced re-evaluation on every edit
- build_result_tree: EvaluationResult -> ResultTree display model
- format_result_tree: ResultTree -> indented text

Usage:
    from playground.query import EvaluationScheduler, build_result_tree, resolve_engine

    engine = resolve_engine()
    scheduler = EvaluationScheduler(engine, on_settle=print)
    settlement = scheduler.mount(query_text, records_text)
    tree = build_result_tree(settlement.result)
"""

from playground.query.engine import QueryEngine, load_engine, resolve_engine
from playground.query.evaluate import evaluate_documents, EvaluationOutcome
from playground.query.exceptions import (
    EvaluationError,
    DocumentSyntaxError,
    ShapeError,
    QueryStructureError,
    QuerySemanticError,
    QueryEvaluationError,
    EngineNotConfiguredError,
)
from playground.query.scheduler import (
    EvaluationScheduler,
    EvaluationSettlement,
    SchedulerState,
)
from playground.query.result_tree import build_result_tree, is_matching_option
from playground.query.formatter import format_result_tree

__all__ = [
    "QueryEngine",
    "load_engine",
    "resolve_engine",
    "evaluate_documents",
    "EvaluationOutcome",
    "EvaluationError",
    "DocumentSyntaxError",
    "ShapeError",
    "QueryStructureError",
    "QuerySemanticError",
    "QueryEvaluationError",
    "EngineNotConfiguredError",
    "EvaluationScheduler",
    "EvaluationSettlement",
    "SchedulerState",
    "build_result_tree",
    "is_matching_option",
    "format_result_tree",
]

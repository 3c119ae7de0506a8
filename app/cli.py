"""DCQL playground command line.

Run with: python -m app.cli --help  (or the `dcql-playground` script)
"""

import sys
import json
import asyncio
import pathlib
from pathlib import Path
from typing import List, Optional

# Ensure the root directory (where pyproject.toml lives) is on sys.path
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

import typer  # type: ignore
from pydantic import ValidationError

from playground.catalog import SAMPLE_QUERIES, SAMPLE_CREDENTIALS
from playground.query import (
    EvaluationScheduler,
    EngineNotConfiguredError,
    build_result_tree,
    format_result_tree,
    load_engine,
    resolve_engine,
)
from playground.query.scheduler import DEFAULT_QUIET_PERIOD
from playground.schemas import CredentialSet
from playground.session import (
    SelectionManager,
    render_query_document,
    render_records_document,
)
from playground.session.watcher import DEFAULT_POLL_INTERVAL, read_documents, watch_documents
from playground.utils.config_loader import load_config
from playground.utils.logger import LoggerManager

app = typer.Typer(help="Evaluate DCQL queries against sample or hand-written credentials.")


def _bootstrap():
    """Load config and apply logging defaults."""
    config = load_config()
    LoggerManager.configure(
        level=config.get("logging.level"),
        use_json=config.get("logging.use_json"),
        log_dir=config.get("logging.log_dir"),
    )
    return config


def _load_engine(engine_path: Optional[str], config):
    try:
        if engine_path:
            return load_engine(engine_path)
        return resolve_engine(config.get("engine.path"))
    except EngineNotConfiguredError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)


@app.command()
def samples():
    """List the sample queries and credentials with their indices."""
    typer.echo("Queries:")
    for index, entry in enumerate(SAMPLE_QUERIES):
        typer.echo(f"  [{index}] {entry.name} ({entry.document.get('id')})")
    typer.echo("Credentials:")
    for index, entry in enumerate(SAMPLE_CREDENTIALS):
        typer.echo(f"  [{index}] {entry.name}")


@app.command()
def render(
    query: List[int] = typer.Option(None, "--query", "-q", help="Query sample index (repeatable). Default: 0"),
    record: List[int] = typer.Option(None, "--record", "-r", help="Credential sample index (repeatable). Default: all"),
    credential_sets: Optional[Path] = typer.Option(
        None, "--credential-sets", help="JSON file with a list of {options, required} credential sets."
    ),
    side: str = typer.Option("both", help="Which document to print: query, records or both."),
):
    """Print the documents generated from a sample selection."""
    _bootstrap()
    selection = SelectionManager()
    try:
        selection.select(query_indices=query or None, record_indices=record or None)
    except IndexError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if credential_sets:
        try:
            raw = json.loads(credential_sets.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError("credential sets file must hold a JSON array")
            sets = [CredentialSet.model_validate(s) for s in raw]
        except (OSError, ValueError, ValidationError) as e:
            typer.echo(f"Error: invalid credential sets file {credential_sets}: {e}", err=True)
            raise typer.Exit(code=1)
        selection.set_credential_sets(sets)

    if side in ("query", "both"):
        typer.echo(render_query_document(selection.state))
    if side in ("records", "both"):
        typer.echo(render_records_document(selection.state))


@app.command()
def evaluate(
    query_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Query document (JSON object)."),
    records_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Credentials document (JSON array)."),
    engine: Optional[str] = typer.Option(None, "--engine", help="'module:attribute' of the query engine."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result instead of the tree."),
):
    """Evaluate a query document against a credentials document once."""
    config = _bootstrap()
    scheduler = EvaluationScheduler(_load_engine(engine, config))
    settlement = scheduler.mount(*read_documents(query_file, records_file))

    if not settlement.ok:
        typer.echo(f"Error: {settlement.error}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(settlement.result_json)
    else:
        typer.echo(format_result_tree(build_result_tree(settlement.result)))


@app.command()
def watch(
    query_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Query document (JSON object)."),
    records_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Credentials document (JSON array)."),
    engine: Optional[str] = typer.Option(None, "--engine", help="'module:attribute' of the query engine."),
    quiet_period: Optional[float] = typer.Option(None, help="Seconds without edits before re-evaluating."),
):
    """Re-evaluate whenever either file changes (Ctrl+C to stop)."""
    config = _bootstrap()
    query_engine = _load_engine(engine, config)
    quiet = quiet_period if quiet_period is not None else config.get(
        "scheduler.quiet_period_seconds", DEFAULT_QUIET_PERIOD
    )
    poll = config.get("watch.poll_interval_seconds", DEFAULT_POLL_INTERVAL)

    def show(settlement):
        typer.echo(f"\n--- evaluation #{settlement.sequence} ---")
        if settlement.ok:
            typer.echo(format_result_tree(build_result_tree(settlement.result)))
        else:
            typer.echo(f"Error: {settlement.error}")

    async def run():
        scheduler = EvaluationScheduler(query_engine, on_settle=show, quiet_period=quiet)
        await watch_documents(query_file, records_file, scheduler, poll_interval=poll)

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        typer.echo("Stopped.")


def main():
    app()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Command-line interface for github-firestore-connector."""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import ConnectorConfig
from .connectors import JsonFileOutputConnector
from .exceptions import ConnectorError
from .models import FirestoreIssueDocument, GitHubIssue, SyncPartialFailure
from .orchestration import PluginOrchestrator
from .pipeline import get_executor, shutdown_executor
from .registry import default_registry

app = typer.Typer(help="GitHub to Firestore connector - issue transformation pipelines")
console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config() -> ConnectorConfig:
    try:
        config = ConnectorConfig.from_env()
    except ConnectorError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(code=2)
    _setup_logging(config.log_level)
    get_executor(config.max_workers)
    return config


def _load_issues(issues_file: Path) -> list[GitHubIssue | None]:
    """Read a JSON array of GitHub issue payloads.

    Null entries are kept as None (the pipeline drops them); entries that do
    not parse are reported and left out.
    """
    try:
        with open(issues_file, encoding="utf-8") as f:
            payload = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: {issues_file} is not valid UTF-8 JSON: {e}[/red]")
        raise typer.Exit(code=1)

    if not isinstance(payload, list):
        console.print(f"[red]Error: {issues_file} must contain a JSON array of issues[/red]")
        raise typer.Exit(code=1)

    issues: list[GitHubIssue | None] = []
    for index, entry in enumerate(payload):
        if entry is None:
            issues.append(None)
            continue
        if not isinstance(entry, dict):
            console.print(f"[yellow]Skipping entry {index}: not a JSON object[/yellow]")
            continue
        try:
            issues.append(GitHubIssue.from_dict(entry))
        except ConnectorError as e:
            console.print(f"[yellow]Skipping entry {index}: {e}[/yellow]")
    return issues


@app.command()
def transform(
    issues_file: Path = typer.Argument(
        ..., help="JSON file with GitHub issue payloads", exists=True, dir_okay=False
    ),
    output_dir: Path = typer.Option(
        None, "--output-dir", "-o", help="Root directory for written documents"
    ),
    collection: str = typer.Option(None, "--collection", "-c", help="Collection name"),
    pipeline_id: str = typer.Option(
        None, "--pipeline", "-p", help="Use this pipeline instead of the best match"
    ),
):
    """Transform GitHub issues and write them as Firestore-shaped JSON documents."""
    config = _load_config()
    issues = _load_issues(issues_file)

    connector = JsonFileOutputConnector(
        output_dir or config.output_dir, collection or config.collection
    )
    registry = default_registry()
    registry.register_connector(connector)
    orchestrator = PluginOrchestrator(registry)

    console.print(f"[bold]Transforming {len(issues)} issues from:[/bold] {issues_file}")
    try:
        registry.initialize_all()
        result = orchestrator.process_batch(
            issues,
            GitHubIssue,
            FirestoreIssueDocument,
            connector.connector_type,
            pipeline_id=pipeline_id,
        )
    except ConnectorError as e:
        console.print(f"[red]✗ Transformation failed: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        registry.shutdown_all()
        shutdown_executor()

    table = Table(title="Sync Result")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right", style="magenta")
    for key, value in result.to_dict().items():
        if key != "errors":
            table.add_row(key, str(value))
    console.print(table)

    if isinstance(result, SyncPartialFailure):
        for error in result.errors[:10]:
            console.print(f"  [red]{error}[/red]")

    if result.is_failure:
        console.print(f"[red]✗ {result.error}[/red]")
        raise typer.Exit(code=1)

    console.print(f"\n[bold green]✓ Documents written to:[/bold green] {connector.collection_dir}")


@app.command()
def preview(
    issues_file: Path = typer.Argument(
        ..., help="JSON file with GitHub issue payloads", exists=True, dir_okay=False
    ),
    limit: int = typer.Option(5, "--limit", "-n", help="Number of documents to show"),
):
    """Transform GitHub issues without writing and print the resulting documents."""
    config = _load_config()
    issues = _load_issues(issues_file)

    registry = default_registry()
    orchestrator = PluginOrchestrator(registry)
    try:
        pipeline = orchestrator.resolve_pipeline(GitHubIssue, FirestoreIssueDocument)
        documents = pipeline.transform_batch(issues).result()
    except ConnectorError as e:
        console.print(f"[red]✗ Transformation failed: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        shutdown_executor()

    console.print(
        f"[bold]{len(documents)} documents[/bold] via {pipeline.pipeline_id} "
        f"(collection: {config.collection})"
    )
    console.print_json(json.dumps([d.to_dict() for d in documents[:limit]]))

    if len(documents) > limit:
        console.print(f"\n[dim]Showing first {limit} of {len(documents)} documents[/dim]")


@app.command()
def pipelines():
    """List registered transformation pipelines."""
    registry = default_registry()

    table = Table(title="Transformation Pipelines")
    table.add_column("Pipeline ID", style="cyan")
    table.add_column("Priority", justify="right", style="magenta")
    table.add_column("Issues → Documents", style="green")

    for pipeline in registry.pipelines():
        supported = pipeline.supports(GitHubIssue, FirestoreIssueDocument)
        table.add_row(pipeline.pipeline_id, str(pipeline.priority), "yes" if supported else "no")

    console.print(table)


if __name__ == "__main__":
    app()

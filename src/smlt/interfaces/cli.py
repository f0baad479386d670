"""Command-line interface for the similar-content client.

Commands:
- similar: Find documents similar to a document ID
- endpoints: List configured backend connections
- info: Show effective configuration
"""

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from smlt.config.loader import get_default_config_path, load_config
from smlt.config.schema import AppConfig
from smlt.errors import ConfigError, ResolutionError
from smlt.observability.logging import configure_logging, get_logger

app = typer.Typer(
    name="smlt",
    help="Find similar content through the Semantic More-Like-This search handler",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.command()
def similar(
    document_id: str = typer.Argument(..., help="Backend ID of the source document"),
    site_root: int = typer.Option(..., "--site-root", "-s", help="Site root page ID"),
    language: int = typer.Option(0, "--language", "-l", help="Language ID"),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of similar documents"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="hybrid, vector_only or mlt_only"),
    vector_weight: Optional[float] = typer.Option(None, "--vector-weight", help="Vector similarity weight"),
    mlt_weight: Optional[float] = typer.Option(None, "--mlt-weight", help="Lexical MLT weight"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Config profile"),
):
    """Find documents similar to DOCUMENT_ID."""
    config = _load_config(config_file, profile)
    defaults = config.defaults

    from smlt.service import create_similarity_service

    service = create_similarity_service(config)
    try:
        outcome = service.find_similar_outcome(
            document_id,
            site_root,
            language_id=language,
            count=defaults.count if count is None else count,
            mode=mode or defaults.mode,
            vector_weight=defaults.vector_weight if vector_weight is None else vector_weight,
            mlt_weight=defaults.mlt_weight if mlt_weight is None else mlt_weight,
        )
    except ResolutionError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)
    finally:
        service.close()

    result = outcome.result

    if as_json:
        typer.echo(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
        if outcome.degraded:
            raise typer.Exit(2)
        return

    if outcome.degraded:
        console.print(f"[yellow]No result from backend ({outcome.status.value}): {escape(outcome.error or '')}[/yellow]")
        raise typer.Exit(2)

    if result.is_empty:
        console.print(f"[yellow]No similar documents found for '{escape(result.source_id)}'[/yellow]")
        return

    table = Table(title=f"Similar to {result.source_id} ({result.mode}, {result.num_found} found)")
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Score", justify="right")

    for i, doc in enumerate(result.docs, 1):
        score = doc.numeric_score
        table.add_row(
            str(i),
            _cell(doc.id),
            _cell(doc.title),
            f"{score:.4f}" if score is not None else "-",
        )

    console.print(table)


@app.command()
def endpoints(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Config profile"),
):
    """List configured backend connections."""
    config = _load_config(config_file, profile)

    if not config.connections:
        console.print("[yellow]No connections configured[/yellow]")
        return

    table = Table(title="Connections")
    table.add_column("Site root", justify="right")
    table.add_column("Language", justify="right")
    table.add_column("Base URI")
    table.add_column("User")
    table.add_column("Password")

    for connection in config.connections:
        table.add_row(
            str(connection.site_root_id),
            "*" if connection.language_id is None else str(connection.language_id),
            connection.core_base_uri(),
            connection.username or "-",
            "****" if connection.password else "-",
        )

    console.print(table)


@app.command()
def info(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Config profile"),
):
    """Show effective configuration."""
    config = _load_config(config_file, profile)

    console.print("[bold]smlt configuration[/bold]")
    console.print(f"  Log level: {config.logging.level.value}")
    console.print(f"  Resolver: {config.resolver.resolver_type.value}")
    console.print(f"  Strict resolution: {config.resolver.strict_resolution}")
    console.print(f"  Timeout: {config.transport.timeout}s")
    console.print(f"  Verify TLS: {config.transport.verify_tls}")
    console.print(f"  Debug scores: {config.transport.debug}")
    console.print(
        f"  Defaults: count={config.defaults.count} mode={config.defaults.mode} "
        f"vectorWeight={config.defaults.vector_weight} mltWeight={config.defaults.mlt_weight}"
    )
    console.print(f"  Connections: {len(config.connections)}")


def _cell(value: Any) -> str:
    """Render a document field for a table cell; multi-valued fields are joined."""
    if value is None or value == "":
        return "-"
    if isinstance(value, list):
        return escape(", ".join(str(v) for v in value))
    return escape(str(value))


def _load_config(config_file: Optional[Path], profile: Optional[str] = None) -> AppConfig:
    """Load configuration and setup logging."""
    if config_file is None:
        config_file = get_default_config_path()

    try:
        config = load_config(config_file, profile=profile)
    except ConfigError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1)

    configure_logging(
        level=config.logging.level.value,
        json_logs=config.logging.json_logs,
        log_dir=config.logging.log_dir,
        enable_file=config.logging.enable_file,
    )

    return config


if __name__ == "__main__":
    app()

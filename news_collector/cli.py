"""
Command-line interface for the News Collector.

Uses Typer to manage sources, the selected model and the API token, and
to trigger a refresh. Supports loading .env files for API key configuration.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console
from rich.table import Table

from .config import AppConfig, load_config
from .errors import ConfigurationError, ProviderError
from .llm.providers.base import select_text_models
from .llm.tracing import flush
from .logging_utils import setup_logging
from .runner import build_provider, build_settings, run_refresh
from .settings import SettingsStore

app = typer.Typer(add_completion=False, help="Collect, unify and rank news from configured sources.")
sources_app = typer.Typer(help="Manage content sources.")
app.add_typer(sources_app, name="sources")
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(Path("config.yaml"), "--config", "-c", help="YAML config file."),
    settings_path: Path | None = typer.Option(
        None, "--settings", help="Settings JSON file (overrides config)."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Load .env, configuration and settings for every command."""
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if settings_path is not None:
        cfg.settings.path = str(settings_path)
    if log_level:
        cfg.logging.level = log_level
    ctx.obj = cfg


def _settings(ctx: typer.Context) -> tuple[AppConfig, SettingsStore]:
    cfg: AppConfig = ctx.obj
    return cfg, build_settings(cfg)


@app.command()
def refresh(ctx: typer.Context):
    """Fetch all sources, extract and unify news, and print the ranked events."""
    cfg, settings = _settings(ctx)
    try:
        orchestrator, outcome = run_refresh(cfg, settings)
    except ConfigurationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    finally:
        flush()

    if outcome.status == "failed":
        console.print(f"[red]Refresh failed:[/red] {orchestrator.last_error.value}")
        raise typer.Exit(code=1)
    if outcome.status == "empty":
        console.print("No news extracted from any source.")
        return
    if outcome.unification_status == "fallback":
        console.print("[yellow]Grouping failed; showing one event per article.[/yellow]")

    table = Table(title="Unified news")
    table.add_column("Score", justify="right")
    table.add_column("Title")
    table.add_column("Sources")
    table.add_column("Articles", justify="right")
    for event in orchestrator.results.value:
        table.add_row(
            str(event.importance_score),
            event.title,
            ", ".join(source.name for source in event.sources),
            str(len(event.original_articles)),
        )
    console.print(table)


@sources_app.command("list")
def sources_list(ctx: typer.Context):
    """List configured sources."""
    _cfg, settings = _settings(ctx)
    table = Table()
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("URL")
    table.add_column("Mode")
    table.add_column("Limit", justify="right")
    for source in settings.load_sources():
        table.add_row(source.id, source.name, source.url, "feed" if source.is_rss else "page", str(source.limit))
    console.print(table)


@sources_app.command("add")
def sources_add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Display name."),
    url: str = typer.Argument(..., help="Page or feed URL."),
    rss: bool = typer.Option(False, "--rss/--page", help="Treat the URL as an RSS/Atom feed."),
    limit: int | None = typer.Option(None, "--limit", "-l", min=0, help="Max items per run."),
):
    """Add a source."""
    cfg, settings = _settings(ctx)
    source = settings.add_source(
        name, url, is_rss=rss, limit=limit if limit is not None else cfg.pipeline.default_source_limit
    )
    console.print(f"Added source {source.name} ({source.id})")


@sources_app.command("remove")
def sources_remove(ctx: typer.Context, source_id: str = typer.Argument(..., help="Source ID.")):
    """Remove a source by ID."""
    _cfg, settings = _settings(ctx)
    if not settings.remove_source(source_id):
        console.print(f"[red]No source with id {source_id}[/red]")
        raise typer.Exit(code=1)
    console.print(f"Removed source {source_id}")


@app.command()
def models(ctx: typer.Context):
    """List text-capable models from the provider catalog."""
    cfg, settings = _settings(ctx)
    setup_logging(cfg.logging)
    try:
        available = select_text_models(build_provider(cfg, settings).list_models())
    except (ConfigurationError, ProviderError) as exc:
        console.print(f"[red]Failed to fetch models:[/red] {exc}")
        raise typer.Exit(code=1)
    selected = settings.selected_model_id()
    table = Table(title="Models")
    table.add_column("")
    table.add_column("ID")
    table.add_column("Name (prompt, completion)")
    for model in available:
        table.add_row("*" if model.id == selected else "", model.id, model.display_name)
    console.print(table)


@app.command("select-model")
def select_model(
    ctx: typer.Context,
    model_id: str = typer.Argument(..., help="Model identifier."),
    offline: bool = typer.Option(False, "--offline", help="Skip catalog lookup."),
):
    """Select the model used for extraction and unification."""
    cfg, settings = _settings(ctx)
    display_name = model_id
    if not offline:
        try:
            catalog = {m.id: m for m in select_text_models(build_provider(cfg, settings).list_models())}
        except (ConfigurationError, ProviderError) as exc:
            console.print(f"[red]Failed to fetch models:[/red] {exc}")
            raise typer.Exit(code=1)
        if model_id not in catalog:
            console.print(f"[red]Unknown or non-text model: {model_id}[/red]")
            raise typer.Exit(code=1)
        display_name = catalog[model_id].display_name
    settings.save_selected_model(model_id, display_name)
    console.print(f"Selected model: {display_name}")


@app.command("set-token")
def set_token(ctx: typer.Context, token: str = typer.Argument(..., help="OpenRouter bearer token.")):
    """Save the OpenRouter bearer token."""
    _cfg, settings = _settings(ctx)
    settings.save_api_token(token)
    console.print("Token saved.")


if __name__ == "__main__":
    app()

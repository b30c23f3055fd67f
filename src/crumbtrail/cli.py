"""CLI commands for building breadcrumb trails from site descriptions."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from .config import ConfigError, CrumbtrailConfig, load_config, load_request
from .context import TrailArgs
from .query import QueryState
from .site import PrimaryTermStore, SiteDataError, SiteGraph
from .trail import TrailBuilder, trail_to_dicts

APP_HELP = "Build breadcrumb trails for a described site."

app = typer.Typer(help=APP_HELP)


@dataclass(slots=True)
class Workspace:
    """Resolved inputs shared by the commands."""

    config: CrumbtrailConfig
    site: SiteGraph
    store: PrimaryTermStore | None = None

    def close(self) -> None:
        if self.store is not None:
            self.store.close()


def _configure_logging(level: str, verbose: bool) -> None:
    resolved = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(level=resolved, format="%(levelname)s %(name)s: %(message)s")


def _open_workspace(
    config: Optional[Path],
    site: Optional[Path],
    db: Optional[Path],
    verbose: bool,
) -> Workspace:
    """Load configuration, site description and (optionally) the metadata store."""
    try:
        crumb_config = load_config(config) if config is not None else CrumbtrailConfig()
    except ConfigError as error:
        raise typer.BadParameter(str(error), param_hint="--config") from error

    _configure_logging(crumb_config.logging.level, verbose)

    site_path = site if site is not None else crumb_config.site_path
    try:
        graph = SiteGraph.from_yaml(site_path)
    except SiteDataError as error:
        typer.echo(f"Failed to load site: {error}")
        raise typer.Exit(code=1) from error

    db_path = db if db is not None else crumb_config.db_path
    store = PrimaryTermStore(db_path) if db_path is not None else None
    return Workspace(config=crumb_config, site=graph, store=store)


def _request_state(workspace: Workspace, request: Optional[Path]) -> QueryState:
    config = workspace.config
    if request is not None:
        source: Any = request.resolve()
    elif config.site.request is not None:
        source = config.site.request
    else:
        source = workspace.site.request
    try:
        state = load_request(source, base_dir=config.base_dir)
    except ConfigError as error:
        raise typer.BadParameter(str(error), param_hint="--request") from error
    # Commands are a batch context: nothing computed here may be memoized.
    state.batch = True
    return state


def _builder(workspace: Workspace, state: QueryState) -> TrailBuilder:
    return TrailBuilder.for_site(workspace.site, state, metadata=workspace.store)


def _config_option() -> Any:
    return typer.Option(None, "--config", "-c", help="Path to the crumbtrail configuration file.")


def _site_option() -> Any:
    return typer.Option(None, "--site", "-s", help="Site description YAML (overrides config).")


def _db_option() -> Any:
    return typer.Option(None, "--db", help="SQLite primary-term store (overrides config).")


def _verbose_option() -> Any:
    return typer.Option(False, "--verbose", "-v", help="Enable debug logging.")


@app.command()
def trail(
    config: Optional[Path] = _config_option(),
    site: Optional[Path] = _site_option(),
    request: Optional[Path] = typer.Option(
        None,
        "--request",
        "-r",
        help="YAML file describing the ambient request.",
    ),
    content_id: Optional[int] = typer.Option(None, "--id", help="Content (or term) id."),
    taxonomy: Optional[str] = typer.Option(None, "--taxonomy", help="Taxonomy of the term given by --id."),
    post_type_archive: Optional[str] = typer.Option(
        None,
        "--post-type-archive",
        help="Post type whose archive to describe.",
    ),
    author: Optional[int] = typer.Option(None, "--author", help="Author id."),
    db: Optional[Path] = _db_option(),
    verbose: bool = _verbose_option(),
) -> None:
    """Print the breadcrumb trail as a JSON array of {url, name} objects."""
    workspace = _open_workspace(config, site, db, verbose)
    try:
        builder = _builder(workspace, _request_state(workspace, request))
        selectors: Dict[str, Any] = {
            "id": content_id,
            "taxonomy": taxonomy,
            "post_type_archive": post_type_archive,
            "author_id": author,
        }
        args = None
        if any(value is not None for value in selectors.values()):
            args = TrailArgs.model_validate(selectors)
        crumbs = builder.build_trail(args)
    finally:
        workspace.close()
    typer.echo(json.dumps(trail_to_dicts(crumbs), indent=2, ensure_ascii=False))


@app.command("primary-term")
def primary_term(
    content_id: int = typer.Option(..., "--id", help="Content id."),
    taxonomy: str = typer.Option("category", "--taxonomy", help="Taxonomy name."),
    config: Optional[Path] = _config_option(),
    site: Optional[Path] = _site_option(),
    db: Optional[Path] = _db_option(),
    verbose: bool = _verbose_option(),
) -> None:
    """Print the primary term id of a piece of content (0 when none)."""
    workspace = _open_workspace(config, site, db, verbose)
    try:
        builder = _builder(workspace, QueryState(batch=True))
        term_id = builder.resolver.resolve_primary_term_id(content_id, taxonomy)
    finally:
        workspace.close()
    typer.echo(str(term_id))


@app.command("set-primary-term")
def set_primary_term(
    content_id: int = typer.Option(..., "--id", help="Content id."),
    term: int = typer.Option(..., "--term", help="Term id to store; 0 clears the assignment."),
    taxonomy: str = typer.Option("category", "--taxonomy", help="Taxonomy name."),
    config: Optional[Path] = _config_option(),
    site: Optional[Path] = _site_option(),
    db: Optional[Path] = _db_option(),
    verbose: bool = _verbose_option(),
) -> None:
    """Store an explicit primary term in the SQLite metadata store."""
    workspace = _open_workspace(config, site, db, verbose)
    try:
        if workspace.store is None:
            raise typer.BadParameter("A metadata store is required (--db or paths.db_path).")
        if workspace.site.get_post(content_id) is None:
            typer.echo(f"Unknown content id {content_id}.")
            raise typer.Exit(code=1)
        if term and workspace.site.get_term(term, taxonomy) is None:
            typer.echo(f"Unknown {taxonomy} term {term}.")
            raise typer.Exit(code=1)
        workspace.store.set_primary_term_id(content_id, taxonomy, term)
    finally:
        workspace.close()
    typer.echo(f"Stored primary {taxonomy} term {term} for content {content_id}.")


if __name__ == "__main__":
    app()

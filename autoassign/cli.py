#!/usr/bin/env python3
"""CLI for the Sentry auto-assign relay."""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .common import setup_logging
from .config import ConfigError, RelayConfig, load_assignments, load_startup, parse_bind_addr

console = Console()
logger = logging.getLogger(__name__)


def _mask(value: str) -> str:
    return "*" * len(value) if value else "Not set"


def _load_config(**overrides) -> RelayConfig:
    """Load configuration from environment, then apply command line overrides."""
    config = RelayConfig.from_env()
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)
    return config


def _abort_startup(error: ConfigError) -> None:
    logger.error(str(error))
    console.print(f"❌ {escape(str(error))}", style="red")
    sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="autoassign")
def cli():
    """Assign new Sentry issues to each project's default user."""
    pass


@cli.command()
@click.option("--api-token", help="Sentry API token (overrides SENTRY_API_TOKEN)")
@click.option("--assign-loc", help="JSON mapping of project to default assignee")
@click.option("--bind-addr", help="Address to bind the web server to")
@click.option("--sentry-dsn", help="Sentry DSN (overrides SENTRY_DSN)")
@click.option("--api-base", help="Sentry API base URL")
@click.option("--log-dir", help="Directory for log files")
def serve(api_token, assign_loc, bind_addr, sentry_dsn, api_base, log_dir):
    """Start the webhook relay."""
    try:
        config = _load_config(
            api_token=api_token,
            assignments_path=assign_loc,
            bind_addr=bind_addr,
            sentry_dsn=sentry_dsn,
            api_base=api_base,
            log_dir=log_dir,
        )
    except ConfigError as e:
        _abort_startup(e)
    setup_logging(config.log_dir)

    try:
        assignments = load_startup(config)
        host, port = parse_bind_addr(config.bind_addr)
    except ConfigError as e:
        _abort_startup(e)

    import uvicorn

    from .event_capture import init_event_capture
    from .sentry_client import SentryClient
    from .server import create_app

    init_event_capture(config.sentry_dsn, release=f"autoassign@{__version__}")
    client = SentryClient(config.api_token, api_base=config.api_base, timeout=config.request_timeout)
    app = create_app(config, assignments, client)

    logger.info(f"Listening on {config.bind_addr}...")
    try:
        uvicorn.run(app, host=host, port=port, log_level="info")
    except KeyboardInterrupt:
        console.print("⏹️  Server stopped by user")
    finally:
        logger.error("Server exited")


@cli.command()
def config():
    """Show current configuration."""
    try:
        cfg = RelayConfig.from_env()
    except ConfigError as e:
        console.print(f"❌ {escape(str(e))}", style="red")
        sys.exit(1)

    console.print("📋 Auto-Assign Configuration:")
    console.print(f"  API Token: {_mask(cfg.api_token)}")
    console.print(f"  Sentry DSN: {_mask(cfg.sentry_dsn)}")
    console.print(f"  Assignments: {cfg.assignments_path}")
    console.print(f"  Bind Address: {cfg.bind_addr}")
    console.print(f"  API Base: {cfg.api_base}")
    console.print(f"  Request Timeout: {cfg.request_timeout}s")
    console.print(f"  Log Directory: {cfg.log_dir}")


@cli.command()
@click.option("--assign-loc", help="JSON mapping of project to default assignee")
def assignments(assign_loc):
    """Validate and list the project -> assignee mapping."""
    try:
        cfg = _load_config(assignments_path=assign_loc)
        mapping = load_assignments(cfg.assignments_path)
    except ConfigError as e:
        console.print(f"❌ {escape(str(e))}", style="red")
        sys.exit(1)

    if not len(mapping):
        console.print("❌ No default assignees configured")
        return

    table = Table(title="Default Assignees")
    table.add_column("Project", style="cyan")
    table.add_column("Assignee", style="green")
    for project, assignee in sorted(mapping.items()):
        table.add_row(project, assignee)

    console.print(table)


if __name__ == "__main__":
    cli()

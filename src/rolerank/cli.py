"""Command-line interface for RoleRank.

This module provides commands for inspecting role tables and migrating
stored role ranks after a role table changes.
"""

import asyncio
import importlib
from typing import NoReturn

import click

from rolerank import __version__
from rolerank.core.config import get_settings
from rolerank.core.logging import configure_logging, get_logger
from rolerank.infrastructure.persistence.database import DatabaseManager
from rolerank.infrastructure.persistence.role_migrator import RoleMigrator
from rolerank.infrastructure.persistence.role_mixin import HasRole


def load_model(path: str) -> type[HasRole]:
    """Resolve a ``module:Class`` path to a HasRole model.

    Args:
        path: Dotted module path and class name separated by a colon.

    Returns:
        The model class.

    Raises:
        click.BadParameter: If the path does not resolve to a HasRole model.
    """
    module_name, _, class_name = path.partition(":")
    if not module_name or not class_name:
        raise click.BadParameter("Expected MODULE:CLASS", param_hint="MODEL")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Cannot import {module_name}: {e}", param_hint="MODEL") from e

    model = getattr(module, class_name, None)
    if not isinstance(model, type) or not issubclass(model, HasRole):
        raise click.BadParameter(f"{path} is not a HasRole model", param_hint="MODEL")
    return model


async def run_migration(model: type[HasRole], database_url: str | None) -> None:
    """Run the role rank migration for ``model`` against a database."""
    db = DatabaseManager(database_url)
    try:
        async with db.session() as session:
            await RoleMigrator(session).migrate(model)
    finally:
        await db.disconnect()


@click.group()
@click.version_option(version=__version__, prog_name="RoleRank")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides ROLERANK_LOG_LEVEL)",
)
def cli(log_level: str | None) -> None:
    """RoleRank - ordered, incremental roles for SQLAlchemy models."""
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)


@cli.command("show-roles")
@click.argument("model_path", metavar="MODEL")
def show_roles(model_path: str) -> None:
    """Print the role table of MODEL (module:Class)."""
    model = load_model(model_path)
    table = model.__role_table__

    if not len(table):
        click.echo(f"{model.__name__} has no roles")
        return

    click.echo(f"{'RANK':>4}  ROLE")
    for name, rank in table.items():
        click.echo(f"{rank:>4}  {name}")


@cli.command("migrate-roles")
@click.argument("model_path", metavar="MODEL")
@click.option(
    "--database-url",
    type=str,
    default=None,
    help="Database URL (overrides ROLERANK_DATABASE_URL)",
)
def migrate_roles(model_path: str, database_url: str | None) -> None:
    """Re-derive and save the role rank of every MODEL record.

    Run this after changing a model's role table.
    """
    model = load_model(model_path)
    logger = get_logger(__name__)

    try:
        asyncio.run(run_migration(model, database_url))
    except Exception as e:
        logger.error("Role migration failed", model=model.__name__, error=str(e))
        click.echo(f"ERROR: Role migration failed: {e}", err=True)
        raise SystemExit(1) from e

    click.echo(f"Migrated role ranks for {model.__name__}")


def main() -> NoReturn:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()

"""
entityspine command-line interface.

Commands::

    entityspine schema app.models:Post                  # print DDL
    entityspine schema app.models:Post --dialect postgresql
    entityspine create-schema app.models:Post --database app.db
    entityspine --version

Record types are addressed as ``MODULE:CLASS``; the module must be
importable from the current environment.
"""

from __future__ import annotations

import importlib
from typing import NoReturn

import typer
from rich.console import Console

from entityspine.dialect import get_dialect
from entityspine.drivers.sqlite import SqliteDriver
from entityspine.entity import Entity
from entityspine.errors import EntitySpineError
from entityspine.logging import configure_logging
from entityspine.repository import Repository
from entityspine.schema import SchemaGenerator
from entityspine.settings import get_settings

app = typer.Typer(
    name="entityspine",
    help="entityspine — metadata-driven entity mapping for SQL stores.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console(markup=False, highlight=False, soft_wrap=True)
err_console = Console(stderr=True, markup=False, highlight=False, soft_wrap=True)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("entityspine")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"entityspine {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """entityspine CLI — inspect and create schemas for record types."""
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")


# ── Helpers ──────────────────────────────────────────────────────────────


def load_entity(target: str) -> type[Entity]:
    """Resolve ``MODULE:CLASS`` to an :class:`Entity` subclass."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise typer.BadParameter(f"Expected MODULE:CLASS, got '{target}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"Cannot import module '{module_name}': {e}") from e

    entity = getattr(module, class_name, None)
    if not isinstance(entity, type) or not issubclass(entity, Entity):
        raise typer.BadParameter(f"'{target}' is not an Entity subclass")
    return entity


def _fail(error: EntitySpineError) -> NoReturn:
    err_console.print(f"Error ({error.category.value}): {error.message}")
    raise typer.Exit(code=1)


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("schema")
def schema_cmd(
    target: str = typer.Argument(..., help="Record type as MODULE:CLASS."),
    dialect: str | None = typer.Option(None, "--dialect", "-d", help="SQL dialect."),
) -> None:
    """Print the CREATE statements for a record type."""
    entity = load_entity(target)
    try:
        sql_dialect = get_dialect(dialect or get_settings().dialect)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--dialect") from e

    # Literal defaults are rendered with SQLite quoting rules.
    driver = SqliteDriver()
    try:
        statements = SchemaGenerator(sql_dialect).create_statements(
            entity.metadata(), driver.quote
        )
    except EntitySpineError as e:
        _fail(e)
    finally:
        driver.close()
    for statement in statements:
        typer.echo(f"{statement};")


@app.command("create-schema")
def create_schema_cmd(
    target: str = typer.Argument(..., help="Record type as MODULE:CLASS."),
    database: str | None = typer.Option(
        None, "--database", "--db", help="SQLite database path."
    ),
) -> None:
    """Create the table and indexes for a record type in a SQLite database."""
    entity = load_entity(target)
    path = database or get_settings().database
    driver = SqliteDriver(path)
    try:
        Repository(driver, entity, dialect=get_dialect("sqlite")).create_schema()
    except EntitySpineError as e:
        _fail(e)
    finally:
        driver.close()
    console.print(f"Created schema '{entity.schema_name()}' in {path}")


__all__ = ["app", "load_entity"]

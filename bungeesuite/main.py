from __future__ import annotations

import sys
from typing import List, Optional

import typer

from bungeesuite.config import get_settings
from bungeesuite.database import (
    ConnectionManager,
    DatabaseError,
    create_manager,
    wait_for_manager,
)
from bungeesuite.utils.logging import configure_logging

app = typer.Typer(help="BungeeSuite database CLI.")


def _manager(wait: int = 0) -> ConnectionManager:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    try:
        if wait > 0:
            return wait_for_manager(settings, attempts=wait)
        return create_manager(settings)
    except DatabaseError as exc:
        typer.echo(f"Database unavailable: {exc}", err=True)
        raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """
    Show effective database and pool settings.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"pool=({settings.pool_min_size},{settings.pool_max_size}) "
        f"timeout={settings.pool_timeout}s"
    )


@app.command()
def check(
    wait: int = typer.Option(
        0,
        "--wait",
        "-w",
        help="Number of connection attempts before giving up (0 = single attempt).",
    ),
) -> None:
    """
    Open the connection pool and verify the server is reachable.
    """
    manager = _manager(wait)
    typer.echo(f"OK: {manager.config.conninfo}")


@app.command()
def query(
    sql: str = typer.Argument(..., help="Query with positional ? placeholders."),
    params: Optional[List[str]] = typer.Argument(None, help="Values bound to the placeholders."),
) -> None:
    """
    Run a query and print the first column of the first row.
    """
    manager = _manager()
    try:
        result = manager.single_result_string_query(sql, *(params or []))
    except DatabaseError as exc:
        typer.echo(f"Query failed: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo("(no rows)" if result is None else result)


@app.command("exec")
def exec_(
    sql: str = typer.Argument(..., help="Statement with positional ? placeholders."),
    params: Optional[List[str]] = typer.Argument(None, help="Values bound to the placeholders."),
) -> None:
    """
    Run an INSERT, UPDATE, DELETE or DDL statement and print the affected rows.
    """
    manager = _manager()
    try:
        count = manager.update(sql, *(params or []))
    except DatabaseError as exc:
        typer.echo(f"Update failed: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{count} row(s) affected")


@app.command("table-exists")
def table_exists(name: str = typer.Argument(..., help="Table name.")) -> None:
    """
    Report whether a table with the given name exists.
    """
    manager = _manager()
    try:
        with manager.connection() as conn:
            exists = manager.does_table_exist(conn, name)
    except DatabaseError as exc:
        typer.echo(f"Lookup failed: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo("yes" if exists else "no")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()

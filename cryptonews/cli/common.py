"""Helpers shared by CLI commands."""

from datetime import datetime
from typing import NoReturn, Optional

import pendulum
import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape

from ..config import Config
from ..db import validate_connection
from ..errors import CryptoNewsError, InvalidRequestError

console = Console()


def load_config() -> Config:
    """Load configuration, exiting with a hint if it is missing or broken."""
    config = Config()
    try:
        _ = config.config
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config.config_path}. Run 'cryptonews init' first.[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    return config


def require_database(config: Config) -> None:
    """Exit unless the configured database is reachable."""
    console.print("[dim]Checking database connection...[/dim]")
    if not validate_connection(config.get_db_config()):
        console.print("[red]❌ Database connection failed![/red]")
        console.print("Please check your database configuration and ensure Postgres is running.")
        raise typer.Exit(1)


def parse_date(value: Optional[str], option: str) -> Optional[datetime]:
    """Parse an ISO date or datetime given on the command line."""
    if not value:
        return None
    try:
        parsed = pendulum.parse(value, tz="UTC")
    except ValueError as e:
        raise InvalidRequestError(f"Invalid {option} date: {value}") from e
    if not isinstance(parsed, datetime):
        raise InvalidRequestError(f"Invalid {option} date: {value}")
    return parsed


def fail(error: CryptoNewsError) -> NoReturn:
    """Report a rejected request and exit non-zero."""
    console.print(f"[red]❌ {escape(str(error))}[/red]")
    raise typer.Exit(1)


def print_json(model: BaseModel) -> None:
    console.print_json(model.model_dump_json())

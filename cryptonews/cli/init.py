"""Init command implementation."""

from pathlib import Path

import typer
from psycopg.errors import DatabaseError
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, save_config, save_sources
from ..config.loader import DEFAULT_CONFIG_DIR
from ..db import init_database, validate_connection
from ..ingestion import DEFAULT_SOURCES

console = Console()


def init_command(
    config_dir: Path = typer.Option(
        DEFAULT_CONFIG_DIR,
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("cryptonews", "--db-name", help="Database name"),
    db_user: str = typer.Option("cryptonews", "--db-user", help="Database user"),
    llm_provider: str = typer.Option("gemini", "--llm-provider", help="LLM provider (gemini, openai, mock)"),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed the built-in crypto news sources",
    ),
    skip_db: bool = typer.Option(False, "--skip-db", help="Only write config files"),
) -> None:
    """Initialize cryptonews configuration and database."""
    console.print(Panel.fit("📰 Crypto News - Initialization", style="bold blue"))

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"

    api_key_env = "OPENAI_API_KEY" if llm_provider == "openai" else "GEMINI_API_KEY"
    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "CRYPTONEWS_DB_PASSWORD",
        },
        llm={
            "provider": llm_provider,
            "model": "gpt-4o-mini" if llm_provider == "openai" else "gemini-2.0-flash",
            "api_key_env": api_key_env,
        },
    )

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    if seed_sources:
        save_sources(list(DEFAULT_SOURCES), sources_path)
        console.print(f"✅ Created sources: {sources_path} (seeded with {len(DEFAULT_SOURCES)} sources)")
    else:
        save_sources([], sources_path)
        console.print(f"✅ Created sources: {sources_path} (empty)")

    if not skip_db:
        console.print("\n[bold]Testing database connection...[/bold]")
        db_config = config.postgres.model_dump()

        if not validate_connection(db_config):
            console.print(
                "[red]❌ Database connection failed![/red]\n"
                "Please ensure Postgres is running and credentials are correct.\n"
                "Set the password via environment variable: [bold]export CRYPTONEWS_DB_PASSWORD=your_password[/bold]"
            )
            raise typer.Exit(1)

        console.print("✅ Database connection successful")

        console.print("\n[bold]Initializing database schema...[/bold]")
        try:
            init_database(db_config)
        except DatabaseError as e:
            console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
            raise typer.Exit(1)
        console.print("✅ Database schema initialized")

    console.print(
        Panel(
            f"[green]✅ cryptonews initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export CRYPTONEWS_DB_PASSWORD=your_password[/bold]\n"
            f"2. Set LLM API key: [bold]export {api_key_env}=your_key[/bold]\n"
            f"3. Run: [bold]cryptonews fetch[/bold]",
            style="green",
        )
    )

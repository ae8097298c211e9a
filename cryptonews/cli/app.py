"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .annotate import annotate_command, summarize_command
from .fetch import fetch_command
from .init import init_command
from .query import (
    annotations_command,
    articles_command,
    insights_command,
    summaries_command,
    tags_command,
)
from .sources import sources_app

app = typer.Typer(
    name="cryptonews",
    help="Crypto News - RSS aggregator with AI summaries",
    no_args_is_help=True,
)

app.command("init")(init_command)
app.command("fetch")(fetch_command)
app.command("annotate")(annotate_command)
app.command("summarize")(summarize_command)
app.command("articles")(articles_command)
app.command("tags")(tags_command)
app.command("annotations")(annotations_command)
app.command("summaries")(summaries_command)
app.command("insights")(insights_command)
app.add_typer(sources_app, name="sources", help="Inspect RSS sources")


if __name__ == "__main__":
    app()

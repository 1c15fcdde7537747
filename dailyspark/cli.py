"""Daily Spark command line: run the server, prepare the database, show today's quote."""

import time
from pathlib import Path

import click
import uvicorn

from dailyspark.client.controller import DailyQuoteController, DisplayState
from dailyspark.client.daily_quote_client import DEFAULT_API_URL, DailyQuoteClient, LocalStore
from dailyspark.core.logging import configure_logging
from dailyspark.core.settings import config_settings

DEFAULT_STATE_FILE = Path.home() / ".dailyspark" / "state.json"

NOTIFICATION_COLORS = {"success": "green", "info": "blue", "error": "red"}


@click.group()
@click.option("--log-level", default=config_settings.LOG_LEVEL, show_default=True)
def cli(log_level: str):
    """Daily Spark: one motivational quote a day."""
    configure_logging(log_level)


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Reload on code changes (development).")
def serve(host: str, port: int, reload: bool):
    """Run the quote assignment handler."""
    uvicorn.run("dailyspark.main:app", host=host, port=port, reload=reload)


@cli.command("init-db")
@click.option("--seed/--no-seed", default=True, show_default=True, help="Insert seed quotes.")
@click.option(
    "--file",
    "quotes_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON list of {text, author} objects to seed instead of the built-in quotes.",
)
def init_db_command(seed: bool, quotes_file: Path | None):
    """Create the tables and optionally seed the quotes catalog."""
    from dailyspark.core.db import SessionLocal, init_db
    from dailyspark.seed import load_quotes_file, seed_quotes

    init_db()
    if not seed:
        return

    quotes = None
    if quotes_file is not None:
        try:
            quotes = load_quotes_file(quotes_file)
        except ValueError as e:
            raise click.ClickException(str(e))

    db = SessionLocal()
    try:
        inserted = seed_quotes(db, quotes)
    finally:
        db.close()
    click.echo(f"Seeded {inserted} quotes.")


@cli.command()
@click.option("--api-url", default=DEFAULT_API_URL, show_default=True)
@click.option(
    "--state-file",
    default=DEFAULT_STATE_FILE,
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where the session token and cached quote are kept.",
)
@click.option("--watch", is_flag=True, help="Keep showing the countdown until the quote expires.")
def quote(api_url: str, state_file: Path, watch: bool):
    """Show today's quote, fetching it only when the cached one has expired."""
    client = DailyQuoteClient.from_url(api_url)
    controller = DailyQuoteController(client, LocalStore(state_file))
    try:
        if controller.load() is DisplayState.NO_QUOTE:
            notification = controller.request_quote()
            if notification is not None:
                click.secho(
                    f"{notification.title} {notification.description}",
                    fg=NOTIFICATION_COLORS.get(notification.level),
                    err=notification.level == "error",
                )
                if notification.level == "error":
                    raise SystemExit(1)

        click.echo(controller.render())
        if not watch:
            return

        while not controller.can_request:
            click.echo(f"\rNew quote in: {controller.time_left()}  ", nl=False)
            time.sleep(1)
        click.echo()
    except KeyboardInterrupt:
        click.echo()
    finally:
        client.close()


if __name__ == "__main__":
    cli()

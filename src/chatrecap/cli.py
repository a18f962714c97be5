"""CLI interface for chatrecap."""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .models import ParseConfiguration, TimeWindow

WINDOW_CHOICES = [w.value for w in TimeWindow]


@click.group()
@click.version_option(version=__version__, prog_name="chatrecap")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging on stderr")
def cli(verbose: bool):
    """chatrecap — Extract recent messages from a chat export.

    Feed it the ZIP your chat app exports and it prints the messages from the
    chosen time window as plain "sender: message" lines, ready to summarize.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command()
@click.argument("zip_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--window",
    "-w",
    type=click.Choice(WINDOW_CHOICES),
    default=None,
    help="Time window to keep (default: CHATRECAP_TIME_WINDOW or past_week)",
)
@click.option("--max-archive-bytes", type=click.IntRange(min=1), default=None, help="Archive size cap")
@click.option("--max-entry-bytes", type=click.IntRange(min=1), default=None, help="Per-transcript size cap")
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), help="Write to a file instead of stdout")
def extract(
    zip_path: str,
    window: str | None,
    max_archive_bytes: int | None,
    max_entry_bytes: int | None,
    output: str | None,
):
    """Extract the recent conversation from a chat export ZIP file.

    Example:
        chatrecap extract ~/Downloads/WhatsApp-Chat.zip --window past_3_days
    """
    from .errors import RecapError
    from .pipeline import process

    settings = ParseConfiguration.from_env().model_dump()
    overrides = {
        "max_archive_bytes": max_archive_bytes,
        "max_entry_bytes": max_entry_bytes,
        "time_window": window,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})
    config = ParseConfiguration(**settings)

    try:
        conversation = process(zip_path, config)
    except RecapError as e:
        logging.getLogger(__name__).debug("Extraction failed: %s", e)
        raise click.ClickException(e.user_message) from e

    line_count = conversation.count("\n") + 1
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(conversation + "\n")
        click.echo(
            click.style("Done!", fg="green", bold=True)
            + f" Wrote {line_count} messages to {output}",
            err=True,
        )
    else:
        click.echo(conversation)
        click.echo(f"{line_count} messages ({config.time_window.label.lower()})", err=True)


@cli.command()
def windows():
    """List the available time windows."""
    for w in TimeWindow:
        hours = w.duration_ms // (60 * 60 * 1000)
        click.echo(f"  {w.value:<12} {w.label} ({hours}h)")


@cli.command()
def serve():
    """Start the MCP server (stdio transport).

    Lets Claude Desktop or Claude Code read chat exports and summarize them.
    """
    from .server import mcp

    mcp.run(transport="stdio")

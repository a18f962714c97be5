"""FastMCP server exposing chat export extraction as tools."""

from __future__ import annotations

import logging
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import MAX_RESPONSE_CHARS
from .errors import RecapError
from .models import ParseConfiguration, TimeWindow
from .pipeline import collect_messages, process

# Logging to stderr only; stdout is the MCP JSON-RPC transport
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)

mcp = FastMCP(
    "chatrecap",
    instructions=(
        "Read chat export ZIP files (e.g. WhatsApp 'Export chat') and return "
        "the recent conversation as plain 'sender: message' lines. "
        "Use extract_conversation to get the text to summarize. "
        "Use get_export_overview to see who is talking and over what dates. "
        "Use list_time_windows to see the accepted time_window values."
    ),
)


def _format_ts(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


def _resolve_window(time_window: str) -> TimeWindow | str:
    """Return the TimeWindow, or an error message for an unknown value."""
    try:
        return TimeWindow(time_window)
    except ValueError:
        valid = ", ".join(w.value for w in TimeWindow)
        return f"Unknown time window '{time_window}'. Use one of: {valid}"


def _check_file(zip_path: str) -> str | None:
    """Return an error message if the export file is missing."""
    if not Path(zip_path).expanduser().is_file():
        return f"File not found: {zip_path}"
    return None


@mcp.tool()
def extract_conversation(zip_path: str, time_window: str = "past_week") -> str:
    """Extract recent messages from a chat export ZIP as 'sender: message' lines.

    Args:
        zip_path: Path to the exported chat ZIP file
        time_window: past_day, past_3_days, past_week (default) or past_month
    """
    err = _check_file(zip_path)
    if err:
        return err
    window = _resolve_window(time_window)
    if isinstance(window, str):
        return window

    config = ParseConfiguration.from_env().model_copy(update={"time_window": window})
    try:
        conversation = process(Path(zip_path).expanduser(), config)
    except RecapError as e:
        return e.user_message

    if len(conversation) > MAX_RESPONSE_CHARS:
        # Keep the newest messages, cut on a line boundary
        tail = conversation[-MAX_RESPONSE_CHARS:]
        tail = tail[tail.find("\n") + 1 :]
        return (
            f"[Truncated — showing the most recent {MAX_RESPONSE_CHARS:,} chars "
            f"of {len(conversation):,}]\n{tail}"
        )
    return conversation


@mcp.tool()
def get_export_overview(zip_path: str) -> str:
    """Summarize what a chat export contains without returning the messages.

    Shows message count, date range and the most active participants.

    Args:
        zip_path: Path to the exported chat ZIP file
    """
    err = _check_file(zip_path)
    if err:
        return err

    try:
        messages = collect_messages(Path(zip_path).expanduser(), ParseConfiguration.from_env())
    except RecapError as e:
        return e.user_message

    if not messages:
        return "No valid chat messages found in this export."

    senders = Counter(m.sender for m in messages)
    timestamps = [m.timestamp for m in messages]
    lines = [
        f"# {Path(zip_path).name}",
        "",
        f"- **Messages**: {len(messages):,}",
        f"- **Participants**: {len(senders):,}",
        f"- **Date range**: {_format_ts(min(timestamps))} → {_format_ts(max(timestamps))}",
        "",
        "## Most active:",
    ]
    for sender, count in senders.most_common(10):
        lines.append(f"- {sender}: {count:,} messages")

    return "\n".join(lines)


@mcp.tool()
def list_time_windows() -> str:
    """List the accepted time_window values for extract_conversation."""
    return "\n".join(f"- {w.value}: {w.label}" for w in TimeWindow)

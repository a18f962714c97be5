"""Extraction pipeline: ZIP reading → validation → parsing → time filter → text."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .archive import ArchiveSource, read_archive
from .errors import EmptyAfterFilter, NoValidMessages
from .models import ChatMessage, ParseConfiguration
from .parser import current_millis, parse_transcript
from .validator import looks_like_chat
from .window import filter_messages

logger = logging.getLogger(__name__)


def render_conversation(messages: Iterable[ChatMessage]) -> str:
    """One ``sender: body`` line per message."""
    return "\n".join(m.render() for m in messages)


def collect_messages(
    source: ArchiveSource,
    config: ParseConfiguration | None = None,
    now: int | None = None,
) -> list[ChatMessage]:
    """Parse every transcript in the archive, unfiltered.

    Messages keep file line order within an entry and entry order across the
    archive; they are not re-sorted by timestamp.
    """
    config = config or ParseConfiguration.from_env()
    if now is None:
        now = current_millis()

    entries = read_archive(source, config.max_archive_bytes, config.max_entry_bytes)
    messages: list[ChatMessage] = []

    for entry in entries:
        text = entry.text
        if not looks_like_chat(text):
            logger.info("Skipping %s: does not look like a chat transcript", entry.name)
            continue

        try:
            parsed = parse_transcript(text, now)
        except Exception:
            logger.warning("Failed to parse %s", entry.name, exc_info=True)
            continue

        if not parsed:
            logger.info("Skipping %s: no messages recognised", entry.name)
            continue

        logger.debug("Parsed %d messages from %s", len(parsed), entry.name)
        messages.extend(parsed)

    return messages


def process(
    source: ArchiveSource,
    config: ParseConfiguration | None = None,
    now: int | None = None,
) -> str:
    """Turn a chat export ZIP into one conversation string for summarization.

    ``now`` is the processing instant in epoch milliseconds; it defaults to
    the current time.

    Raises:
        NoValidMessages: no transcript in the archive yielded a message.
        EmptyAfterFilter: messages were found but none fall in the window.
        FileTooLarge, InvalidArchiveFormat, IoFailure: from reading the archive.
    """
    config = config or ParseConfiguration.from_env()
    if now is None:
        now = current_millis()

    messages = collect_messages(source, config, now)
    if not messages:
        raise NoValidMessages()

    recent = filter_messages(messages, config.time_window, now)
    if not recent:
        raise EmptyAfterFilter(config.time_window, found=len(messages))

    logger.info(
        "Kept %d of %d messages within %s",
        len(recent),
        len(messages),
        config.time_window.label.lower(),
    )
    return render_conversation(recent)

"""Parse chat export transcript lines into ChatMessages.

Export formats vary between app versions and locales, and none of them is
authoritative. Each physical line is therefore run through an ordered list of
strategies and the first one that recognises the line wins:

1. exact bracket form    ``[2025-09-16, 5:31:01 PM] Justin: Hi``
2. generic bracket form  ``[<anything>] Justin: Hi``
3. bare colon form       ``Justin: Hi``
4. legacy fallback       known bracketed (or Android dash) timestamp prefixes

Lines are parsed standalone. Continuation lines of a multi-line message are
not glued back onto their message; each is tried as a message of its own.
"""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime
from typing import Callable, NamedTuple

from .config import MAX_SENDER_CHARS
from .models import ChatMessage
from .normalizer import normalize

logger = logging.getLogger(__name__)

# Group notices and placeholders that are not real conversation
SYSTEM_PHRASES = (
    "messages and calls are end-to-end encrypted",
    "messages to this chat and calls are now secured",
    "joined using this group",
    "left the group",
    "was added",
    "was removed",
    "changed the group description",
    "changed the subject",
    "changed this group",
    "created group",
    "security code changed",
    "this message was deleted",
    "you deleted this message",
    "message deleted",
    "<media omitted>",
    "media omitted",
    "image omitted",
    "video omitted",
    "audio omitted",
    "sticker omitted",
    "gif omitted",
    "document omitted",
)

# Marks some exporters put in front of a line
_LEADING_MARKS = "\ufeff\u200e\u200f"


class DateTimePattern(NamedTuple):
    """One timestamp shape: a regex for the text and the strptime format reading it."""

    name: str
    regex: str
    fmt: str


_AMPM = r"\s?[AaPp]\.?\s?[Mm]\.?"

_DATE_PARTS = (
    ("yyyy-MM-dd", r"\d{4}-\d{2}-\d{2}", "%Y-%m-%d"),
    ("dd/MM/yy", r"\d{2}/\d{2}/\d{2}", "%d/%m/%y"),
    ("dd/MM/yyyy", r"\d{2}/\d{2}/\d{4}", "%d/%m/%Y"),
    ("M/d/yy", r"\d{1,2}/\d{1,2}/\d{2}", "%m/%d/%y"),
    ("M/d/yyyy", r"\d{1,2}/\d{1,2}/\d{4}", "%m/%d/%Y"),
    ("dd.MM.yy", r"\d{2}\.\d{2}\.\d{2}", "%d.%m.%y"),
    ("dd.MM.yyyy", r"\d{2}\.\d{2}\.\d{4}", "%d.%m.%Y"),
    ("dd-MM-yy", r"\d{2}-\d{2}-\d{2}", "%d-%m-%y"),
    ("dd-MM-yyyy", r"\d{2}-\d{2}-\d{4}", "%d-%m-%Y"),
)

_TIME_PARTS = (
    ("HH:mm:ss", r"\d{1,2}:\d{2}:\d{2}", "%H:%M:%S"),
    ("HH:mm", r"\d{1,2}:\d{2}", "%H:%M"),
    ("h:mm:ss a", r"\d{1,2}:\d{2}:\d{2}" + _AMPM, "%I:%M:%S %p"),
    ("h:mm a", r"\d{1,2}:\d{2}" + _AMPM, "%I:%M %p"),
)

DATE_TIME_PATTERNS = tuple(
    DateTimePattern(
        name=f"{date_name}, {time_name}",
        regex=rf"{date_re},?\s+{time_re}",
        fmt=f"{date_fmt} {time_fmt}",
    )
    for date_name, date_re, date_fmt in _DATE_PARTS
    for time_name, time_re, time_fmt in _TIME_PARTS
)

_STAMP_RES = tuple(
    (re.compile(p.regex), p) for p in DATE_TIME_PATTERNS
)
_BRACKET_PREFIX_RES = tuple(
    (re.compile(rf"\[(?P<stamp>{p.regex})\]\s*"), p) for p in DATE_TIME_PATTERNS
)
_DASH_PREFIX_RES = tuple(
    (re.compile(rf"(?P<stamp>{p.regex})\s+-\s+"), p) for p in DATE_TIME_PATTERNS
)

EXACT_BRACKET_RE = re.compile(
    r"^\[(?P<stamp>\d{4}-\d{2}-\d{2}, \d{1,2}:\d{2}:\d{2} [AP]M)\] (?P<sender>[^:]*):(?P<body>.*)$"
)
EXACT_BRACKET_FMT = "%Y-%m-%d, %I:%M:%S %p"

GENERIC_BRACKET_RE = re.compile(
    r"^\[(?P<stamp>[^\]]+)\]\s+(?P<sender>[^:]+):(?P<body>.*)$"
)


class _Fields(NamedTuple):
    timestamp: int
    sender: str
    body: str


def current_millis() -> int:
    return int(time.time() * 1000)


def _to_millis(dt: datetime) -> int | None:
    """Epoch milliseconds for a naive local wall time."""
    try:
        return int(dt.timestamp() * 1000)
    except (OverflowError, OSError, ValueError):
        return None


def _canonical_stamp(stamp: str) -> str:
    """Rewrite AM/PM spellings and separators so strptime sees one shape."""
    stamp = re.sub(
        r"\s*([AaPp])\.?\s?[Mm]\.?$",
        lambda m: " " + m.group(1).upper() + "M",
        stamp.strip(),
    )
    return re.sub(r",?\s+", " ", stamp)


def _strptime_millis(stamp: str, pattern: DateTimePattern) -> int | None:
    try:
        dt = datetime.strptime(_canonical_stamp(stamp), pattern.fmt)
    except ValueError:
        return None
    return _to_millis(dt)


def parse_timestamp(text: str) -> int | None:
    """Try every known date-time pattern against the whole of ``text``.

    Returns epoch milliseconds, or None when no pattern both matches and
    yields a real calendar date.
    """
    text = text.strip()
    for regex, pattern in _STAMP_RES:
        if regex.fullmatch(text):
            millis = _strptime_millis(text, pattern)
            if millis is not None:
                return millis
    return None


def _exact_bracket(line: str, now: int) -> _Fields | None:
    m = EXACT_BRACKET_RE.match(line)
    if not m:
        return None
    try:
        dt = datetime.strptime(m.group("stamp"), EXACT_BRACKET_FMT)
    except ValueError:
        return None
    millis = _to_millis(dt)
    if millis is None:
        return None
    return _Fields(millis, m.group("sender"), m.group("body"))


def _generic_bracket(line: str, now: int) -> _Fields | None:
    m = GENERIC_BRACKET_RE.match(line)
    if not m:
        return None
    millis = parse_timestamp(m.group("stamp"))
    if millis is None:
        logger.debug("Unrecognised timestamp %r, using current time", m.group("stamp"))
        millis = now
    return _Fields(millis, m.group("sender"), m.group("body"))


def _bare_colon(line: str, now: int) -> _Fields | None:
    # Bracketed and dash-timestamped lines belong to the other strategies
    if line.startswith("[") or any(regex.match(line) for regex, _ in _DASH_PREFIX_RES):
        return None
    idx = line.find(": ")
    if idx <= 0 or idx >= len(line) / 2:
        return None
    sender = line[:idx].strip()
    if len(sender) > MAX_SENDER_CHARS or not any(c.isalnum() for c in sender):
        return None
    return _Fields(now, sender, line[idx + 2 :])


def _legacy_prefix(line: str, now: int) -> _Fields | None:
    for regex, pattern in _BRACKET_PREFIX_RES + _DASH_PREFIX_RES:
        m = regex.match(line)
        if not m:
            continue
        millis = _strptime_millis(m.group("stamp"), pattern)
        if millis is None:
            continue
        remainder = line[m.end() :]
        idx = remainder.find(": ")
        if idx <= 0:
            return None
        return _Fields(millis, remainder[:idx], remainder[idx + 2 :])
    return None


Strategy = Callable[[str, int], "_Fields | None"]

STRATEGIES: tuple[Strategy, ...] = (
    _exact_bracket,
    _generic_bracket,
    _bare_colon,
    _legacy_prefix,
)


def is_system_message(body: str) -> bool:
    lowered = body.lower()
    return any(phrase in lowered for phrase in SYSTEM_PHRASES)


def parse_line(line: str, now: int | None = None) -> ChatMessage | None:
    """Parse one physical transcript line.

    Returns None for blank lines, lines no strategy recognises, system notices
    and lines whose sender or body is empty after normalization. ``now`` (epoch
    ms) stands in for timestamps that are missing or unreadable.
    """
    line = line.rstrip("\r").lstrip(_LEADING_MARKS)
    if not line.strip():
        return None
    if now is None:
        now = current_millis()

    for strategy in STRATEGIES:
        fields = strategy(line, now)
        if fields is None:
            continue

        sender = normalize(fields.sender)
        body = normalize(fields.body)
        if not sender or not body:
            return None
        # System notices are suppressed whichever strategy matched
        if is_system_message(body):
            return None
        return ChatMessage(timestamp=fields.timestamp, sender=sender, body=body)

    return None


def parse_transcript(text: str, now: int | None = None) -> list[ChatMessage]:
    """Parse every line of a transcript, keeping file order."""
    if now is None:
        now = current_millis()

    messages: list[ChatMessage] = []
    lines = text.split("\n")
    for line in lines:
        message = parse_line(line, now)
        if message is not None:
            messages.append(message)

    logger.debug("Parsed %d messages from %d lines", len(messages), len(lines))
    return messages

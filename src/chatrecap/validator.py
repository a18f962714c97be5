"""Cheap heuristic that decides whether a text file looks like a chat transcript.

Kept deliberately permissive: a stray README slipping through only costs a
parse pass, while rejecting an unfamiliar export format loses the chat.
"""

from __future__ import annotations

import re

from .config import (
    VALIDATOR_LONG_TEXT_LINES,
    VALIDATOR_PLAUSIBLE_LINES,
    VALIDATOR_SAMPLE_LINES,
)

# Optional date, optional bracket, then H:MM or HH:MM
TIME_HINT_RE = re.compile(
    r"\[?(?:\d{1,4}[/.\-]\d{1,2}[/.\-]\d{1,4},?\s*)?\b\d{1,2}:\d{2}\b"
)


def _has_time(line: str) -> bool:
    return TIME_HINT_RE.search(line) is not None


def _has_early_colon(line: str) -> bool:
    """True if the first colon sits before the line's midpoint (``sender: body``).

    A colon in the first column does not count, since there is no sender before it.
    """
    idx = line.find(":")
    return 0 < idx < len(line) / 2


def looks_like_chat(text: str) -> bool:
    lines = text.split("\n")
    plausible = 0
    sampled = 0

    for line in lines:
        line = line.strip()
        if not line:
            continue
        sampled += 1
        if _has_time(line) or _has_early_colon(line):
            plausible += 1
            if plausible >= VALIDATOR_PLAUSIBLE_LINES:
                return True
        if sampled >= VALIDATOR_SAMPLE_LINES:
            break

    if plausible >= 1:
        return True
    return len(lines) > VALIDATOR_LONG_TEXT_LINES and ":" in text

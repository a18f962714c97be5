"""Text cleanup applied to every sender and message body."""

from __future__ import annotations

import re

_INVISIBLE_RE = re.compile(
    "[\u00ad\u061c\u180e\u200b-\u200f\u202a-\u202e\u2060-\u2064\u2066-\u2069\ufeff]"
)
# C0/C1 controls, keeping \t \n \v \f \r
_CONTROL_RE = re.compile("[\x00-\x08\x0e-\x1f\x7f-\x9f]")
_QUOTE_RE = re.compile("[\u2018-\u201f\u2032\u2033`\u00b4]")
_DASH_RE = re.compile("[\u2012-\u2015]")
_NON_LATIN1_RE = re.compile(r"[^\x20-\x7e\xa0-\xff\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Fold text down to printable ASCII plus Latin-1 with single spaces.

    Emoji and characters from non-Latin scripts are removed entirely.
    Idempotent: normalize(normalize(s)) == normalize(s).
    """
    text = _INVISIBLE_RE.sub("", text)
    text = _CONTROL_RE.sub("", text)
    text = _QUOTE_RE.sub('"', text)
    text = _DASH_RE.sub("-", text)
    text = text.replace("\u2026", "...")
    text = _NON_LATIN1_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()

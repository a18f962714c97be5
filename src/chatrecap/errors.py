"""Error taxonomy for the extraction pipeline.

Archive-level structural failures and the two "nothing survived" conditions
are the only errors that reach callers. Each carries a short ``user_message``
suitable for showing to a person as-is.
"""

from __future__ import annotations

from .config import MIB
from .models import TimeWindow


class RecapError(Exception):
    """Base class for every error the pipeline surfaces."""

    kind = "recap_error"
    user_message = "Something went wrong while reading the chat export."

    def __init__(self, message: str | None = None, user_message: str | None = None):
        if user_message is not None:
            self.user_message = user_message
        super().__init__(message or self.user_message)


class InvalidArchiveFormat(RecapError):
    kind = "invalid_archive_format"
    user_message = "The selected file is not a valid chat export ZIP."


class IoFailure(RecapError):
    kind = "io_failure"
    user_message = "Unable to access the selected file."


class FileTooLarge(RecapError):
    kind = "file_too_large"

    def __init__(self, size: int, limit: int, entry: str | None = None):
        self.size = size
        self.limit = limit
        self.entry = entry
        target = f"Entry '{entry}'" if entry else "Archive"
        super().__init__(f"{target} is too large: {size:,} bytes exceeds limit of {limit:,} bytes")

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return f"File is too large (limit is {self.limit / MIB:g}MB)."


class NoValidMessages(RecapError):
    kind = "no_valid_messages"
    user_message = "No valid chat files found in the export."


class EmptyAfterFilter(RecapError):
    kind = "empty_after_filter"

    def __init__(self, window: TimeWindow, found: int = 0):
        self.window = window
        self.found = found
        super().__init__(
            f"{found} message(s) found but none within the {window.label.lower()}"
        )

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return (
            f"No messages from the {self.window.label.lower()}. "
            "Try a longer time window."
        )

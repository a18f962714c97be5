"""chatrecap — turn a chat export ZIP into a clean, recent conversation transcript."""

from .errors import (
    EmptyAfterFilter,
    FileTooLarge,
    InvalidArchiveFormat,
    IoFailure,
    NoValidMessages,
    RecapError,
)
from .models import ChatMessage, ParseConfiguration, TimeWindow
from .pipeline import process

__version__ = "0.1.0"

__all__ = [
    "ChatMessage",
    "EmptyAfterFilter",
    "FileTooLarge",
    "InvalidArchiveFormat",
    "IoFailure",
    "NoValidMessages",
    "ParseConfiguration",
    "RecapError",
    "TimeWindow",
    "process",
]

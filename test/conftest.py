"""Pytest configuration and shared fixtures."""

import io
import zipfile
from datetime import datetime

import pytest


def _local_ms(*args) -> int:
    """Epoch milliseconds for a naive local wall time."""
    return int(datetime(*args).timestamp() * 1000)


@pytest.fixture
def local_ms():
    """Convert datetime(...) arguments to local epoch milliseconds."""
    return _local_ms


@pytest.fixture
def now_ms() -> int:
    """Fixed processing instant: 2025-01-02 00:00:00 local time."""
    return _local_ms(2025, 1, 2)


@pytest.fixture
def make_zip():
    """Build an in-memory ZIP from a {name: content} mapping."""

    def _make(entries: dict, compression: int = zipfile.ZIP_DEFLATED) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", compression=compression) as zf:
            for name, content in entries.items():
                if isinstance(content, str):
                    content = content.encode("utf-8")
                zf.writestr(name, content)
        return buf.getvalue()

    return _make


class NonSeekableStream(io.RawIOBase):
    """Read-only byte stream that cannot seek, like a pipe."""

    def __init__(self, data: bytes):
        self._buf = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        chunk = self._buf.read(len(b))
        b[: len(chunk)] = chunk
        return len(chunk)


@pytest.fixture
def non_seekable():
    """Wrap bytes in a stream whose ``seekable()`` is False."""
    return NonSeekableStream

"""Read plain-text transcripts out of a chat export ZIP.

Only ``.txt`` members are read; media and other attachments are skipped
without comment. A broken or oversized member is logged and skipped so it
cannot block the good ones. Only problems with the archive as a whole are
raised.
"""

from __future__ import annotations

import io
import logging
import lzma
import os
import zipfile
import zlib
from typing import BinaryIO, Union

from .config import MAX_ARCHIVE_BYTES, MAX_ENTRY_BYTES, READ_CHUNK_BYTES, TRANSCRIPT_SUFFIX
from .errors import FileTooLarge, InvalidArchiveFormat, IoFailure
from .models import RawEntry

logger = logging.getLogger(__name__)

ArchiveSource = Union[bytes, bytearray, BinaryIO, str, os.PathLike]

# Failures confined to one member
_ENTRY_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    lzma.LZMAError,
    EOFError,
    NotImplementedError,
    RuntimeError,
)


def _declared_size(source: ArchiveSource) -> int | None:
    """Size of the archive as reported before reading it, if knowable."""
    if isinstance(source, (bytes, bytearray)):
        return len(source)
    if isinstance(source, (str, os.PathLike)):
        return os.stat(source).st_size
    if getattr(source, "closed", False):
        raise ValueError("I/O operation on closed file")
    if not source.seekable():
        return None
    pos = source.tell()
    end = source.seek(0, io.SEEK_END)
    source.seek(pos)
    return end - pos


def _buffer_stream(stream: BinaryIO, max_archive_bytes: int) -> io.BytesIO:
    """Copy a non-seekable stream into memory, stopping once it passes the cap."""
    buf = io.BytesIO()
    total = 0
    while True:
        chunk = stream.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > max_archive_bytes:
            raise FileTooLarge(total, max_archive_bytes)
        buf.write(chunk)
    buf.seek(0)
    return buf


def _open_zip(source: ArchiveSource) -> zipfile.ZipFile:
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    try:
        return zipfile.ZipFile(source)
    except zipfile.BadZipFile as e:
        raise InvalidArchiveFormat(f"Not a valid ZIP archive: {e}") from e
    except (OSError, ValueError) as e:
        raise IoFailure(f"Could not read archive: {e}") from e


def is_transcript_name(name: str) -> bool:
    return name.lower().endswith(TRANSCRIPT_SUFFIX)


def read_entry(zf: zipfile.ZipFile, info: zipfile.ZipInfo, max_entry_bytes: int) -> bytes:
    """Read one member in chunks, raising FileTooLarge past ``max_entry_bytes``."""
    if info.file_size > max_entry_bytes:
        raise FileTooLarge(info.file_size, max_entry_bytes, entry=info.filename)

    chunks: list[bytes] = []
    total = 0
    with zf.open(info) as fh:
        while True:
            chunk = fh.read(READ_CHUNK_BYTES)
            if not chunk:
                break
            total += len(chunk)
            # Declared sizes can lie
            if total > max_entry_bytes:
                raise FileTooLarge(total, max_entry_bytes, entry=info.filename)
            chunks.append(chunk)
    return b"".join(chunks)


def read_archive(
    source: ArchiveSource,
    max_archive_bytes: int = MAX_ARCHIVE_BYTES,
    max_entry_bytes: int = MAX_ENTRY_BYTES,
) -> list[RawEntry]:
    """Return the ``.txt`` members of a ZIP archive in directory order.

    ``source`` may be raw bytes, a binary file object or a path. A stream
    that cannot seek is copied into memory first, up to ``max_archive_bytes``.

    Raises:
        FileTooLarge: the archive, or the total read from it, exceeds
            ``max_archive_bytes``.
        InvalidArchiveFormat: the input is empty or not a ZIP file.
        IoFailure: the underlying file or stream could not be read.
    """
    try:
        size = _declared_size(source)
        if size is None:
            source = _buffer_stream(source, max_archive_bytes)
            size = _declared_size(source)
    except (OSError, ValueError) as e:
        raise IoFailure(f"Could not read archive: {e}") from e

    if size == 0:
        raise InvalidArchiveFormat("Archive is empty", user_message="The selected file is empty.")
    if size > max_archive_bytes:
        raise FileTooLarge(size, max_archive_bytes)

    entries: list[RawEntry] = []
    total_read = 0

    with _open_zip(source) as zf:
        for info in zf.infolist():
            if info.is_dir() or not is_transcript_name(info.filename):
                continue

            try:
                data = read_entry(zf, info, max_entry_bytes)
            except FileTooLarge as e:
                logger.warning("Skipping %s: %s", info.filename, e)
                continue
            except _ENTRY_ERRORS as e:
                logger.warning("Skipping unreadable entry %s: %s", info.filename, e)
                continue
            except OSError as e:
                # bzip2 reports a bad stream as an OSError without errno
                if e.errno is None:
                    logger.warning("Skipping unreadable entry %s: %s", info.filename, e)
                    continue
                raise IoFailure(f"Could not read {info.filename}: {e}") from e

            total_read += len(data)
            if total_read > max_archive_bytes:
                raise FileTooLarge(total_read, max_archive_bytes)

            entries.append(RawEntry(name=info.filename, data=data))

    logger.debug("Read %d transcript entries", len(entries))
    return entries

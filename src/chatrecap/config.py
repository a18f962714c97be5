"""Central configuration for size limits, defaults and parser constants."""

import os

MIB = 1024 * 1024

# Size caps, override with CHATRECAP_MAX_ARCHIVE_BYTES / CHATRECAP_MAX_ENTRY_BYTES
MAX_ARCHIVE_BYTES = int(os.environ.get("CHATRECAP_MAX_ARCHIVE_BYTES", 20 * MIB))
MAX_ENTRY_BYTES = int(os.environ.get("CHATRECAP_MAX_ENTRY_BYTES", 20 * MIB))

# Default recap window (a TimeWindow value)
TIME_WINDOW = os.environ.get("CHATRECAP_TIME_WINDOW", "past_week")

# Archive reading
TRANSCRIPT_SUFFIX = ".txt"
READ_CHUNK_BYTES = 64 * 1024

# Content validation
VALIDATOR_SAMPLE_LINES = 100  # Non-empty lines inspected
VALIDATOR_PLAUSIBLE_LINES = 3  # Early accept threshold
VALIDATOR_LONG_TEXT_LINES = 10  # Above this, any colon is enough

# Line parsing
MAX_SENDER_CHARS = 50

# MCP tool responses
MAX_RESPONSE_CHARS = 50_000

"""End-to-end tests for the extraction pipeline."""

import logging

import pytest
from pydantic import ValidationError

from chatrecap.errors import EmptyAfterFilter, FileTooLarge, NoValidMessages
from chatrecap.models import ParseConfiguration, TimeWindow
from chatrecap.pipeline import collect_messages, process, render_conversation

WEEK = ParseConfiguration(time_window=TimeWindow.PAST_WEEK)

CHAT = (
    "[2025-01-01, 10:00:00 AM] Bob: hey\n"
    "[2025-01-01, 10:05:00 AM] Amy: yo\n"
)


class TestProcess:
    def test_single_transcript(self, make_zip, now_ms):
        data = make_zip({"chat.txt": CHAT})
        assert process(data, WEEK, now=now_ms) == "Bob: hey\nAmy: yo"

    def test_only_media_entries(self, make_zip, now_ms):
        data = make_zip({"photo.jpg": b"\xff\xd8\xff\xe0"})
        with pytest.raises(NoValidMessages):
            process(data, WEEK, now=now_ms)

    def test_non_chat_text_is_skipped(self, make_zip, now_ms, caplog):
        data = make_zip({"README.txt": "Exported with love\nNothing to see here"})
        with caplog.at_level(logging.INFO, logger="chatrecap.pipeline"):
            with pytest.raises(NoValidMessages):
                process(data, WEEK, now=now_ms)
        assert "does not look like a chat transcript" in caplog.text

    def test_everything_outside_window(self, make_zip, local_ms):
        data = make_zip({"chat.txt": CHAT})
        now = local_ms(2025, 2, 1)
        with pytest.raises(EmptyAfterFilter) as exc_info:
            process(data, WEEK, now=now)
        assert exc_info.value.window is TimeWindow.PAST_WEEK
        assert exc_info.value.found == 2
        assert "longer time window" in exc_info.value.user_message

    def test_window_selects_subset(self, make_zip, local_ms):
        chat = (
            "[2025-01-01, 10:00:00 AM] Bob: old news\n"
            "[2025-01-05, 9:00:00 AM] Amy: fresh news\n"
        )
        data = make_zip({"chat.txt": chat})
        config = ParseConfiguration(time_window=TimeWindow.PAST_DAY)
        assert process(data, config, now=local_ms(2025, 1, 5, 12)) == "Amy: fresh news"

    def test_entries_are_concatenated_in_archive_order(self, make_zip, now_ms):
        """Messages are not merged by timestamp across files."""
        later = "[2025-01-01, 11:00:00 AM] Carol: later\n[2025-01-01, 11:30:00 AM] Dan: later too"
        earlier = "[2025-01-01, 9:00:00 AM] Eve: earlier\n[2025-01-01, 9:30:00 AM] Fay: earlier too"
        data = make_zip({"a.txt": later, "b.txt": earlier})
        assert process(data, WEEK, now=now_ms).splitlines() == [
            "Carol: later",
            "Dan: later too",
            "Eve: earlier",
            "Fay: earlier too",
        ]

    def test_oversized_entry_does_not_block_others(self, make_zip, now_ms):
        data = make_zip({"huge.txt": "Zed: " + "z" * 500, "chat.txt": CHAT})
        config = ParseConfiguration(max_entry_bytes=200, time_window=TimeWindow.PAST_WEEK)
        assert process(data, config, now=now_ms) == "Bob: hey\nAmy: yo"

    def test_oversized_archive(self, make_zip, now_ms):
        data = make_zip({"chat.txt": CHAT})
        config = ParseConfiguration(max_archive_bytes=10)
        with pytest.raises(FileTooLarge) as exc_info:
            process(data, config, now=now_ms)
        assert "too large" in exc_info.value.user_message

    def test_non_seekable_stream(self, make_zip, non_seekable, now_ms):
        data = make_zip({"chat.txt": CHAT})
        assert process(non_seekable(data), WEEK, now=now_ms) == "Bob: hey\nAmy: yo"

    def test_system_messages_are_dropped(self, make_zip, now_ms):
        chat = (
            "[2025-01-01, 9:59:00 AM] Bob: Messages and calls are end-to-end encrypted\n"
            + CHAT
            + "[2025-01-01, 10:06:00 AM] Amy: <Media omitted>\n"
        )
        data = make_zip({"chat.txt": chat})
        assert process(data, WEEK, now=now_ms) == "Bob: hey\nAmy: yo"


class TestCollectMessages:
    def test_returns_unfiltered_messages(self, make_zip, local_ms):
        data = make_zip({"chat.txt": CHAT})
        messages = collect_messages(data, WEEK, now=local_ms(2030, 1, 1))
        assert [m.sender for m in messages] == ["Bob", "Amy"]
        assert messages[0].timestamp == local_ms(2025, 1, 1, 10, 0)


class TestRender:
    def test_render_conversation(self, make_zip, now_ms):
        messages = collect_messages(make_zip({"chat.txt": CHAT}), WEEK, now=now_ms)
        assert render_conversation(messages) == "Bob: hey\nAmy: yo"
        assert render_conversation([]) == ""


class TestConfiguration:
    def test_defaults(self):
        config = ParseConfiguration()
        assert config.max_archive_bytes == 20 * 1024 * 1024
        assert config.max_entry_bytes == 20 * 1024 * 1024
        assert config.time_window is TimeWindow.PAST_WEEK

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CHATRECAP_TIME_WINDOW", "past_day")
        monkeypatch.setenv("CHATRECAP_MAX_ENTRY_BYTES", "1024")
        config = ParseConfiguration.from_env()
        assert config.time_window is TimeWindow.PAST_DAY
        assert config.max_entry_bytes == 1024

    def test_rejects_invalid_values(self):
        with pytest.raises(ValidationError):
            ParseConfiguration(max_archive_bytes=0)
        with pytest.raises(ValidationError):
            ParseConfiguration(time_window="past_decade")

    def test_is_immutable(self):
        with pytest.raises(ValidationError):
            WEEK.max_entry_bytes = 1

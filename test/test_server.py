"""Tests for the MCP tool functions."""

from pathlib import Path

import pytest

from chatrecap import server
from chatrecap.server import extract_conversation, get_export_overview, list_time_windows

RECENT_CHAT = "Alice: lunch at noon?\nBob: sounds good\nAlice: see you there"


@pytest.fixture
def export_zip(tmp_path: Path, make_zip) -> Path:
    path = tmp_path / "export.zip"
    path.write_bytes(make_zip({"chat.txt": RECENT_CHAT}))
    return path


class TestExtractConversation:
    def test_returns_conversation(self, export_zip):
        assert extract_conversation(str(export_zip)) == RECENT_CHAT

    def test_missing_file(self, tmp_path):
        assert extract_conversation(str(tmp_path / "missing.zip")).startswith("File not found")

    def test_unknown_window(self, export_zip):
        result = extract_conversation(str(export_zip), time_window="fortnight")
        assert "Unknown time window 'fortnight'" in result
        assert "past_week" in result

    def test_pipeline_errors_become_messages(self, tmp_path, make_zip):
        path = tmp_path / "media.zip"
        path.write_bytes(make_zip({"photo.jpg": b"\xff\xd8"}))
        assert extract_conversation(str(path)) == "No valid chat files found in the export."

    def test_empty_file_is_reported_as_empty(self, tmp_path):
        path = tmp_path / "empty.zip"
        path.write_bytes(b"")
        assert extract_conversation(str(path)) == "The selected file is empty."

    def test_long_conversations_keep_newest_lines(self, export_zip, monkeypatch):
        monkeypatch.setattr(server, "MAX_RESPONSE_CHARS", 30)
        result = extract_conversation(str(export_zip))
        assert result.startswith("[Truncated")
        assert result.endswith("Alice: see you there")
        assert "lunch at noon" not in result


class TestOverview:
    def test_counts_participants(self, export_zip):
        result = get_export_overview(str(export_zip))
        assert "**Messages**: 3" in result
        assert "**Participants**: 2" in result
        assert "- Alice: 2 messages" in result

    def test_missing_file(self, tmp_path):
        assert get_export_overview(str(tmp_path / "missing.zip")).startswith("File not found")


def test_list_time_windows():
    result = list_time_windows()
    assert "- past_week: Past week" in result
    assert result.count("\n") == 3

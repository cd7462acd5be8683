"""Tests for session file parsing."""

import pytest

from team_hq.sessions.parser import extract_text, parse_session_file

from .helpers import write_session


class TestExtractText:
    def test_string_content_is_returned_as_is(self):
        assert extract_text("hello there") == "hello there"

    def test_text_blocks_are_joined_with_newlines(self):
        content = [
            {"type": "text", "text": "first"},
            {"type": "tool_use", "name": "bash", "input": {}},
            {"type": "text", "text": "second"},
        ]
        assert extract_text(content) == "first\nsecond"

    def test_non_dict_blocks_are_ignored(self):
        assert extract_text(["raw", {"type": "text", "text": "ok"}]) == "ok"

    @pytest.mark.parametrize("content", [None, 42, {"type": "text", "text": "x"}])
    def test_other_shapes_yield_empty_text(self, content):
        assert extract_text(content) == ""


class TestParseSessionFile:
    def test_keeps_user_and_assistant_in_order(self, temp_dir):
        path = write_session(
            temp_dir / "s.jsonl",
            [
                {"role": "user", "content": "Hi Ryan", "timestamp": "2025-01-01T00:00:00Z"},
                {"role": "system", "content": "boot"},
                {"role": "toolResult", "content": "output"},
                {
                    "role": "assistant",
                    "content": [{"type": "text", "text": "Hello"}],
                    "timestamp": "2025-01-01T00:00:01Z",
                    "model": "claude-sonnet",
                },
            ],
        )

        turns = parse_session_file(path, "main")

        assert [t.role for t in turns] == ["user", "assistant"]
        assert turns[0].text == "Hi Ryan"
        assert turns[1].text == "Hello"
        assert turns[1].model == "claude-sonnet"
        assert all(t.agent_id == "main" and t.source_file == path for t in turns)

    def test_malformed_line_does_not_invalidate_file(self, temp_dir):
        """One bad line among N valid lines still yields N turns."""
        path = write_session(
            temp_dir / "s.jsonl",
            [
                {"role": "user", "content": "one"},
                '{"role": "assistant", "content": ',
                {"role": "assistant", "content": "two"},
                "[1, 2, 3]",
                {"role": "user", "content": "three"},
            ],
        )

        turns = parse_session_file(path, "main")

        assert [t.text for t in turns] == ["one", "two", "three"]

    def test_blank_lines_are_skipped(self, temp_dir):
        path = temp_dir / "s.jsonl"
        path.write_text('\n\n{"role": "user", "content": "hey"}\n\n', encoding="utf-8")

        assert len(parse_session_file(path, "main")) == 1

    def test_missing_timestamp_is_kept_as_none(self, temp_dir):
        path = write_session(temp_dir / "s.jsonl", [{"role": "user", "content": "hey"}])

        assert parse_session_file(path, "main")[0].timestamp is None

    def test_missing_file_raises(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            parse_session_file(temp_dir / "missing.jsonl", "main")

"""Tests for scanning session files into a delivery batch."""

import os
import time

from team_hq.fingerprint import fingerprint
from team_hq.scanner import scan
from team_hq.state import SyncState

from .helpers import iso, write_session


def age_file(path, hours):
    """Set a file's mtime ``hours`` into the past."""
    past = time.time() - hours * 3600
    os.utime(path, (past, past))


class TestScan:
    def test_missing_root_yields_nothing(self, temp_dir, roster):
        assert scan(temp_dir / "nope", 24, SyncState(), roster) == []

    def test_agent_without_sessions_dir_is_skipped(self, agents_dir, roster):
        (agents_dir / "main").mkdir()

        assert scan(agents_dir, 24, SyncState(), roster) == []

    def test_heartbeat_example(self, agents_dir, roster):
        write_session(
            agents_dir / "ryan-chen" / "sessions" / "s1.jsonl",
            [
                {"role": "assistant", "content": "HEARTBEAT ok William", "timestamp": iso(10)},
                {"role": "assistant", "content": "Hey William, let's ship this", "timestamp": iso(5)},
            ],
        )

        candidates = scan(agents_dir, 24, SyncState(), roster)

        assert len(candidates) == 1
        assert candidates[0].sender == "ryan"
        assert candidates[0].recipient == "william"
        assert candidates[0].text == "Hey William, let's ship this"

    def test_sorted_by_timestamp_across_agents(self, agents_dir, roster):
        write_session(
            agents_dir / "main" / "sessions" / "a.jsonl",
            [
                {"role": "assistant", "content": "Ryan, third", "timestamp": iso(1)},
                {"role": "assistant", "content": "Ryan, first", "timestamp": iso(30)},
            ],
        )
        write_session(
            agents_dir / "ryan-chen" / "sessions" / "b.jsonl",
            [{"role": "assistant", "content": "William, second", "timestamp": iso(10)}],
        )

        candidates = scan(agents_dir, 24, SyncState(), roster)

        assert [c.text for c in candidates] == ["Ryan, first", "William, second", "Ryan, third"]

    def test_stale_file_is_skipped_even_with_recent_turns(self, agents_dir, roster):
        path = write_session(
            agents_dir / "main" / "sessions" / "old.jsonl",
            [{"role": "assistant", "content": "Ryan, recent line", "timestamp": iso(5)}],
        )
        age_file(path, 48)

        assert scan(agents_dir, 24, SyncState(), roster) == []

    def test_old_turns_in_recent_file_are_dropped(self, agents_dir, roster):
        write_session(
            agents_dir / "main" / "sessions" / "a.jsonl",
            [
                {"role": "assistant", "content": "Ryan, old news", "timestamp": iso(60 * 30)},
                {"role": "assistant", "content": "Ryan, fresh news", "timestamp": iso(5)},
                {"role": "assistant", "content": "Ryan, bad stamp", "timestamp": "not a date"},
            ],
        )

        candidates = scan(agents_dir, 24, SyncState(), roster)

        assert [c.text for c in candidates] == ["Ryan, fresh news"]

    def test_already_synced_are_excluded(self, agents_dir, roster):
        ts = iso(5)
        write_session(
            agents_dir / "main" / "sessions" / "a.jsonl",
            [
                {"role": "assistant", "content": "Ryan, done", "timestamp": ts},
                {"role": "assistant", "content": "Ryan, new", "timestamp": ts},
            ],
        )
        state = SyncState(fingerprints=[fingerprint("Ryan, done", ts)])

        candidates = scan(agents_dir, 24, state, roster)

        assert [c.text for c in candidates] == ["Ryan, new"]

    def test_same_turn_in_two_files_is_sent_once(self, agents_dir, roster):
        record = {"role": "assistant", "content": "Ryan, copied", "timestamp": iso(5)}
        write_session(agents_dir / "main" / "sessions" / "a.jsonl", [record])
        write_session(agents_dir / "main" / "sessions" / "b.jsonl", [record])

        assert len(scan(agents_dir, 24, SyncState(), roster)) == 1

    def test_only_jsonl_files_are_read(self, agents_dir, roster):
        write_session(
            agents_dir / "main" / "sessions" / "notes.txt",
            [{"role": "assistant", "content": "Ryan, hidden", "timestamp": iso(5)}],
        )

        assert scan(agents_dir, 24, SyncState(), roster) == []

    def test_unreadable_file_does_not_stop_scan(self, agents_dir, roster):
        bad = agents_dir / "main" / "sessions" / "bad.jsonl"
        bad.parent.mkdir(parents=True)
        bad.write_bytes(b"\xff\xfe\x00 not utf-8")
        write_session(
            agents_dir / "main" / "sessions" / "good.jsonl",
            [{"role": "assistant", "content": "Ryan, still here", "timestamp": iso(5)}],
        )

        candidates = scan(agents_dir, 24, SyncState(), roster)

        assert [c.text for c in candidates] == ["Ryan, still here"]

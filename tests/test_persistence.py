"""
Tests for persistence — the run history ledger.
"""

import json
from pathlib import Path

from devsetup.core.persistence.audit import (
    AuditEntry,
    AuditWriter,
    TaskOutcome,
    default_audit_path,
)


class TestAuditEntry:
    def _entry(self) -> AuditEntry:
        return AuditEntry(
            operation_id="op-1",
            status="partial",
            tasks=[
                TaskOutcome(name="android-sdk", state="succeeded"),
                TaskOutcome(
                    name="android-emulator",
                    state="failed",
                    error="Command failed (exit 1): avdmanager",
                    mitigation="Install it manually",
                ),
            ],
            not_run=["later"],
        )

    def test_installers_include_not_run(self):
        assert self._entry().installers == ["android-sdk", "android-emulator", "later"]

    def test_errors(self):
        assert self._entry().errors == ["android-emulator: Command failed (exit 1): avdmanager"]

    def test_count(self):
        entry = self._entry()
        assert entry.count("succeeded") == 1
        assert entry.count("skipped") == 0

    def test_timestamp_set(self):
        assert AuditEntry().timestamp
        assert AuditEntry().operation_type == "setup-dev"


class TestAuditWriter:
    """Tests for the append-only ledger."""

    def test_write_and_read(self, tmp_path: Path):
        """Entries roundtrip through write/read."""
        writer = AuditWriter(tmp_path / "audit.ndjson")
        writer.write(AuditEntry(
            operation_id="op-1",
            status="ok",
            tasks=[TaskOutcome(name="android-sdk", state="succeeded", duration_ms=12)],
        ))

        entries = writer.read_all()
        assert len(entries) == 1
        assert entries[0].operation_id == "op-1"
        assert entries[0].tasks[0].duration_ms == 12

    def test_append_only(self, tmp_path: Path):
        """Multiple writes append, never overwrite."""
        writer = AuditWriter(tmp_path / "audit.ndjson")
        for i in range(5):
            writer.write(AuditEntry(operation_id=f"op-{i}"))

        entries = writer.read_all()
        assert [e.operation_id for e in entries] == [f"op-{i}" for i in range(5)]

    def test_one_json_object_per_line(self, tmp_path: Path):
        path = tmp_path / "audit.ndjson"
        writer = AuditWriter(path)
        writer.write(AuditEntry(operation_id="a", not_run=["android-emulator"]))
        writer.write(AuditEntry(operation_id="b"))

        lines = path.read_text().strip().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["not_run"] == ["android-emulator"]

    def test_read_recent(self, tmp_path: Path):
        writer = AuditWriter(tmp_path / "audit.ndjson")
        for i in range(10):
            writer.write(AuditEntry(operation_id=f"op-{i}"))

        recent = writer.read_recent(3)
        assert [e.operation_id for e in recent] == ["op-7", "op-8", "op-9"]
        assert writer.read_recent(0) == []

    def test_missing_file(self, tmp_path: Path):
        writer = AuditWriter(tmp_path / "missing.ndjson")
        assert writer.read_all() == []

    def test_corrupt_lines_skipped(self, tmp_path: Path):
        path = tmp_path / "audit.ndjson"
        writer = AuditWriter(path)
        writer.write(AuditEntry(operation_id="good"))
        with path.open("a") as f:
            f.write("not json\n\n")
        writer.write(AuditEntry(operation_id="also-good"))

        assert [e.operation_id for e in writer.read_all()] == ["good", "also-good"]

    def test_creates_parent_directories(self, tmp_path: Path):
        path = tmp_path / "deep" / "nested" / "audit.ndjson"
        AuditWriter(path).write(AuditEntry(operation_id="x"))
        assert path.is_file()

    def test_write_failure_does_not_raise(self, tmp_path: Path):
        """A ledger path that cannot be created is logged, not raised."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        writer = AuditWriter(blocker / "audit.ndjson")

        writer.write(AuditEntry(operation_id="x"))
        assert writer.read_all() == []

    def test_default_path_under_home(self, isolated_home: Path):
        assert default_audit_path() == isolated_home / ".devsetup" / "audit.ndjson"
        assert AuditWriter().path == default_audit_path()

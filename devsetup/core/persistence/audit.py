"""
Run history — one NDJSON line per ``setup-dev`` run.

The ledger lives at ``~/.devsetup/audit.ndjson`` unless the config
points elsewhere.  Lines are only ever appended; ``devsetup history``
reads them back, newest last.

    {"timestamp": "...", "operation_id": "op-...", "status": "partial",
     "tasks": [{"name": "android-sdk", "state": "failed", ...}], ...}
"""

from __future__ import annotations

import json
import logging
from collections import deque
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Iterator

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

AUDIT_DIR = ".devsetup"
AUDIT_FILE = "audit.ndjson"


def default_audit_path() -> Path:
    return Path.home() / AUDIT_DIR / AUDIT_FILE


class TaskOutcome(BaseModel):
    """How one installer ended in a recorded run."""

    name: str
    state: str
    duration_ms: int = 0
    error_type: str | None = None
    error: str | None = None
    mitigation: str | None = None


class AuditEntry(BaseModel):
    """One recorded setup run."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    operation_id: str = ""
    operation_type: str = "setup-dev"
    status: str = ""               # ok, partial, failed
    dry_run: bool = False
    aborted: bool = False
    tasks: list[TaskOutcome] = Field(default_factory=list)
    not_run: list[str] = Field(default_factory=list)
    context: dict[str, Any] = Field(default_factory=dict)

    @property
    def installers(self) -> list[str]:
        """Every installer the run selected, reached or not."""
        return [t.name for t in self.tasks] + self.not_run

    @property
    def failures(self) -> list[TaskOutcome]:
        return [t for t in self.tasks if t.state == "failed"]

    @property
    def errors(self) -> list[str]:
        return [f"{t.name}: {t.error}" for t in self.failures]

    def count(self, state: str) -> int:
        return sum(1 for t in self.tasks if t.state == state)


class AuditWriter:
    """Appends entries to, and reads them back from, one ledger file."""

    def __init__(self, path: Path | None = None):
        self._path = path if path is not None else default_audit_path()

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: AuditEntry) -> None:
        """Append ``entry`` as a single line.

        Write failures are logged and do not propagate.
        """
        line = entry.model_dump_json() + "\n"
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            logger.error("Could not record run %s in %s: %s", entry.operation_id, self._path, e)
            return
        logger.debug("Recorded run %s (%s)", entry.operation_id, entry.status)

    def iter_entries(self) -> Iterator[AuditEntry]:
        """Yield entries oldest first, skipping lines that do not parse."""
        if not self._path.is_file():
            return
        try:
            with self._path.open("r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    if not line.strip():
                        continue
                    try:
                        yield AuditEntry.model_validate(json.loads(line))
                    except (json.JSONDecodeError, ValidationError) as e:
                        logger.warning("%s:%d: skipping unreadable entry: %s", self._path, line_num, e)
        except OSError as e:
            logger.error("Could not read run history %s: %s", self._path, e)

    def read_all(self) -> list[AuditEntry]:
        return list(self.iter_entries())

    def read_recent(self, n: int = 20) -> list[AuditEntry]:
        """The last ``n`` entries, oldest first."""
        if n <= 0:
            return []
        return list(deque(self.iter_entries(), maxlen=n))

"""Classification audit trail: append-only JSON Lines with rotation and hash chain."""

from __future__ import annotations

import fcntl
import hashlib
import json
from dataclasses import dataclass
from pathlib import Path

from recicla_bot.models import AuditEvent

_DEFAULT_MAX_BYTES = 10 * 1024 * 1024
_DEFAULT_BACKUP_COUNT = 5


@dataclass
class ChainValidationResult:
    valid: bool
    broken_at_line: int | None = None


def _line_hash(line: str) -> str:
    return hashlib.sha256(line.encode()).hexdigest()


def _chain_files(log_path: Path) -> list[Path]:
    """Rotated backups, oldest first, followed by the live log."""
    backups: list[Path] = []
    index = 1
    while True:
        backup = log_path.with_name(f"{log_path.name}.{index}")
        if not backup.exists():
            break
        backups.append(backup)
        index += 1
    return [*reversed(backups), log_path]


def validate_audit_chain(log_path: Path) -> ChainValidationResult:
    """Check that every entry's prev_hash matches the line before it.

    The chain runs through the rotated backups (``audit.jsonl.N`` down to
    ``audit.jsonl.1``) into the live file, and ``broken_at_line`` counts
    lines across all of them, oldest first. The oldest retained entry may
    point at a line that rotation has already discarded; only an unrotated
    log must start from ``prev_hash: null``.
    """
    files = _chain_files(log_path)
    lines = [
        line
        for path in files if path.exists()
        for line in path.read_text().split("\n") if line
    ]
    rotated = len(files) > 1

    previous: str | None = None
    for number, line in enumerate(lines, start=1):
        prev_hash = json.loads(line).get("prev_hash")
        if previous is None:
            if prev_hash is not None and not rotated:
                return ChainValidationResult(valid=False, broken_at_line=number)
        elif prev_hash != _line_hash(previous):
            return ChainValidationResult(valid=False, broken_at_line=number)
        previous = line

    return ChainValidationResult(valid=True)


class AuditLogger:
    """Records one event per handled webhook request."""

    def __init__(
        self,
        log_path: str,
        max_bytes: int = _DEFAULT_MAX_BYTES,
        backup_count: int = _DEFAULT_BACKUP_COUNT,
    ) -> None:
        self.log_path = Path(log_path)
        self._max_bytes = max_bytes
        self._backup_count = backup_count
        self._last_line: str | None = None
        # Resume the hash chain from an existing log
        if self.log_path.exists():
            lines = [line for line in self.log_path.read_text().split("\n") if line]
            if lines:
                self._last_line = lines[-1]

    def _backup_path(self, index: int) -> Path:
        return self.log_path.with_name(f"{self.log_path.name}.{index}")

    def _maybe_rotate(self) -> None:
        if not self.log_path.exists() or self.log_path.stat().st_size < self._max_bytes:
            return

        self._backup_path(self._backup_count).unlink(missing_ok=True)
        for index in range(self._backup_count - 1, 0, -1):
            backup = self._backup_path(index)
            if backup.exists():
                backup.rename(self._backup_path(index + 1))
        self.log_path.rename(self._backup_path(1))

    def log(self, event: AuditEvent) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        data = event.model_dump(mode="json")
        data["prev_hash"] = _line_hash(self._last_line) if self._last_line is not None else None
        line = json.dumps(data, separators=(",", ":"))

        lock_path = self.log_path.with_name(f".{self.log_path.name}.lock")
        with open(lock_path, "w") as lock:
            fcntl.flock(lock, fcntl.LOCK_EX)
            try:
                self._maybe_rotate()
                with open(self.log_path, "a") as f:
                    f.write(line + "\n")
            finally:
                fcntl.flock(lock, fcntl.LOCK_UN)

        self._last_line = line

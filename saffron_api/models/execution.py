"""
    ExecutionResult model - outcome of running one command.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ExecutionResult:
    """
    Value object returned by every executor.

    Attributes:
        ok:          Whether the command succeeded.
        exit_code:   Process exit code, ``0``/``1`` for in-process
                     execution, ``None`` when nothing could be spawned.
        stdout:      Captured standard output (or adapter text).
        stderr:      Captured standard error (or failure message).
        started_at:  When execution began (UTC).
        ended_at:    When execution finished (UTC).
        error:       Spawn / transport failure description, if any.
        timed_out:   The child was killed after exceeding its time limit.
        truncated:   Output beyond the configured cap was discarded.
    """
    ok: bool
    exit_code: Optional[int]
    stdout: str
    stderr: str
    started_at: datetime
    ended_at: datetime
    error: Optional[str] = None
    timed_out: bool = False
    truncated: bool = False

    @classmethod
    def from_output(cls, stdout: str, stderr: str,
                    started_at: datetime,
                    ended_at: Optional[datetime] = None) -> 'ExecutionResult':
        """
        Build an in-process result: success is defined by an empty
        ``stderr``.
        """
        ok = stderr == ""
        return cls(
            ok=ok,
            exit_code=0 if ok else 1,
            stdout=stdout,
            stderr=stderr,
            started_at=started_at,
            ended_at=ended_at or utc_now(),
        )

    @classmethod
    def failure(cls, message: str, started_at: Optional[datetime] = None) -> 'ExecutionResult':
        """A failed result with ``message`` on stderr and nothing on stdout."""
        started_at = started_at or utc_now()
        return cls.from_output("", message, started_at)

    @property
    def duration_ms(self) -> int:
        elapsed = (self.ended_at - self.started_at).total_seconds() * 1000
        return max(0, int(elapsed))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the terminal endpoint's JSON shape."""
        data: Dict[str, Any] = {
            'ok': self.ok,
            'code': self.exit_code,
            'stdout': self.stdout,
            'stderr': self.stderr,
            'startedAt': self.started_at.isoformat(),
            'endedAt': self.ended_at.isoformat(),
            'durationMs': self.duration_ms,
        }
        if self.error is not None:
            data['error'] = self.error
        if self.timed_out:
            data['timedOut'] = True
        if self.truncated:
            data['truncated'] = True
        return data

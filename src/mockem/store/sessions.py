"""
Session quota tracking.

A session is an opaque id mapped to usage counters that expire a fixed time
after creation. The store is in-memory and thread-safe; concurrent requests on
one session are serialized per call but validate/apply is not atomic across
calls.
"""

from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from mockem.errors import QuotaExceededError, SessionExpiredError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class QuotaLimits:
    """Daily caps per session."""
    max_rows: int = 500
    max_exports: int = 5
    max_schemas: int = 10

    def to_dict(self) -> Dict[str, int]:
        return {
            "maxRows": self.max_rows,
            "maxExports": self.max_exports,
            "maxSchemas": self.max_schemas,
        }


@dataclass(frozen=True)
class UsageDelta:
    """Counters a request wants to add."""
    rows: int = 0
    exports: int = 0
    schemas: int = 0


@dataclass
class SessionUsage:
    rows_generated: int = 0
    exports_used: int = 0
    schemas_used: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "rowsGenerated": self.rows_generated,
            "exportsUsed": self.exports_used,
            "schemasUsed": self.schemas_used,
        }


@dataclass
class SessionRecord:
    session_id: str
    created_at: datetime
    last_used: datetime
    usage: SessionUsage = field(default_factory=SessionUsage)


class SessionStore:
    """Key-value store of session counters with a time-to-live."""

    def __init__(
        self,
        limits: Optional[QuotaLimits] = None,
        ttl: timedelta = timedelta(hours=24),
        clock: Clock = _utcnow,
    ):
        self.limits = limits or QuotaLimits()
        self.ttl = ttl
        self._clock = clock
        self._sessions: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def create(self) -> SessionRecord:
        """Issue a new session with zeroed counters."""
        now = self._clock()
        record = SessionRecord(
            session_id=secrets.token_hex(32),
            created_at=now,
            last_used=now,
        )
        with self._lock:
            self._purge_expired(now)
            self._sessions[record.session_id] = record
        logger.info(f"Created session {record.session_id[:8]}...")
        return record

    def get(self, session_id: Optional[str]) -> Optional[SessionRecord]:
        """Return the live session for `session_id`, or None if absent/expired."""
        if not session_id:
            return None
        with self._lock:
            return self._live(session_id, self._clock())

    def usage(self, session_id: Optional[str]) -> SessionUsage:
        """Copy of the session's counters; zeroed when absent or expired."""
        record = self.get(session_id)
        if record is None:
            return SessionUsage()
        return SessionUsage(**vars(record.usage))

    def expires_at(self, record: SessionRecord) -> datetime:
        return record.created_at + self.ttl

    def validate(self, session_id: Optional[str], delta: UsageDelta) -> None:
        """
        Check that `delta` fits in the session's remaining allowance.

        Raises:
            SessionExpiredError: session unknown or expired
            QuotaExceededError: a daily cap would be exceeded
        """
        record = self.get(session_id)
        if record is None:
            raise SessionExpiredError(session_id)

        usage = record.usage
        limits = self.limits

        if usage.rows_generated + delta.rows > limits.max_rows:
            remaining = max(limits.max_rows - usage.rows_generated, 0)
            raise QuotaExceededError(
                f"Daily row limit exceeded. You can generate {remaining} more rows today."
            )

        if delta.exports and usage.exports_used + delta.exports > limits.max_exports:
            raise QuotaExceededError(
                f"Daily export limit exceeded. You can export {limits.max_exports} "
                f"times per day."
            )

        if delta.schemas and usage.schemas_used + delta.schemas > limits.max_schemas:
            raise QuotaExceededError(
                f"Daily schema limit exceeded. You can generate {limits.max_schemas} "
                f"schema batches per day."
            )

    def apply(self, session_id: str, delta: UsageDelta) -> SessionUsage:
        """Add `delta` to the session's counters and return the new totals."""
        now = self._clock()
        with self._lock:
            record = self._live(session_id, now)
            if record is None:
                raise SessionExpiredError(session_id)

            record.usage.rows_generated += delta.rows
            record.usage.exports_used += delta.exports
            record.usage.schemas_used += delta.schemas
            record.last_used = now
            return SessionUsage(**vars(record.usage))

    def _live(self, session_id: str, now: datetime) -> Optional[SessionRecord]:
        record = self._sessions.get(session_id)
        if record is None:
            return None
        if now >= record.created_at + self.ttl:
            del self._sessions[session_id]
            return None
        return record

    def _purge_expired(self, now: datetime) -> None:
        expired = [
            sid for sid, record in self._sessions.items()
            if now >= record.created_at + self.ttl
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug(f"Purged {len(expired)} expired sessions")

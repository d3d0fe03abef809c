"""API access waitlist."""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass
class WaitlistEntry:
    email: str
    company: Optional[str] = None
    use_case: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class WaitlistStore:
    """In-memory waitlist keyed by email; repeat sign-ups are ignored."""

    def __init__(self):
        self._entries: Dict[str, WaitlistEntry] = {}
        self._lock = threading.Lock()

    def join(
        self,
        email: str,
        company: Optional[str] = None,
        use_case: Optional[str] = None,
    ) -> Tuple[bool, str]:
        """Record interest; returns (success, user-facing message)."""
        email = (email or "").strip()
        if not EMAIL_PATTERN.match(email):
            return False, "Please provide a valid email address"

        key = email.lower()
        with self._lock:
            if key not in self._entries:
                self._entries[key] = WaitlistEntry(
                    email=email,
                    company=company or None,
                    use_case=use_case or None,
                )
                logger.info(f"Waitlist entries: {len(self._entries)}")

        return True, (
            "Thank you for your interest! We'll notify you when API access "
            "becomes available."
        )

    def __contains__(self, email: str) -> bool:
        return email.strip().lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

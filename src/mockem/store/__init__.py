"""
Session quota and waitlist stores.
"""

from mockem.store.sessions import (
    QuotaLimits,
    SessionRecord,
    SessionStore,
    SessionUsage,
    UsageDelta,
)
from mockem.store.waitlist import WaitlistStore

__all__ = [
    "QuotaLimits",
    "SessionRecord",
    "SessionStore",
    "SessionUsage",
    "UsageDelta",
    "WaitlistStore",
]

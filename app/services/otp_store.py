"""
OTP Store for Para Sports ID Card System
Bounded, time-indexed cache of one-time codes used for card detail lookups

The store lives in process memory, so each replica keeps its own codes.
Deployments running more than one instance need a shared cache backend.
Issuing and consuming codes belongs to the card detail lookup layer, which
lives with the email flow outside this service; the app itself only sweeps.
"""

import logging
import secrets
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from app.core.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OTPEntry:
    code: str
    expires_at: float


class OTPStore:
    """
    Mapping of email -> (code, expiry instant).

    Entries are removed when consumed successfully, lazily when an expired
    entry is looked up, and in bulk by sweep_expired(). When full, the
    oldest issued entry is evicted.
    """

    def __init__(self, ttl_seconds: int, max_entries: int,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, OTPEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    @staticmethod
    def generate_code() -> str:
        """Six-digit numeric code"""
        return str(100000 + secrets.randbelow(900000))

    def issue(self, email: str, code: Optional[str] = None) -> str:
        """Store a fresh code for email, replacing any previous one"""
        code = code or self.generate_code()
        key = self._key(email)
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.warning(f"OTP store full, evicted code for {evicted}")
            self._entries[key] = OTPEntry(code=code, expires_at=self._clock() + self.ttl_seconds)
        return code

    def consume(self, email: str, code: str) -> bool:
        """
        Verify and remove a code.

        A wrong code leaves the entry in place; an expired entry is removed
        and never verifies.
        """
        key = self._key(email)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if self._clock() > entry.expires_at:
                del self._entries[key]
                logger.info(f"OTP expired for {key}")
                return False
            if not secrets.compare_digest(entry.code, str(code)):
                return False
            del self._entries[key]
            return True

    def sweep_expired(self) -> int:
        """Remove every expired entry; returns how many were removed"""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info(f"Swept {len(expired)} expired OTP entries")
        return len(expired)


def get_otp_store() -> OTPStore:
    """Build an OTP store from settings"""
    settings = get_settings()
    return OTPStore(ttl_seconds=settings.OTP_TTL_SECONDS, max_entries=settings.OTP_MAX_ENTRIES)


otp_store = get_otp_store()

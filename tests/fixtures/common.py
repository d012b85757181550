"""
Common/Shared Fixtures

Base factories and a controllable clock used across multiple services.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional


class FakeClock:
    """Settable clock for injecting into time-dependent components"""

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def make_username() -> str:
    return f"user_{uuid.uuid4().hex[:8]}"


def make_email(prefix: Optional[str] = None) -> str:
    """Generate a unique email"""
    prefix = prefix or f"test_{uuid.uuid4().hex[:8]}"
    return f"{prefix}@example.com"


def make_timestamp() -> datetime:
    """Naive local timestamp, as the task store assigns them"""
    return datetime.now().replace(microsecond=0)

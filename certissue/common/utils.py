"""Helper signatures: utc_now, days_to_ms, b64e, b64d."""

import base64
import datetime

MS_PER_DAY = 86_400_000


def utc_now() -> datetime.datetime:
    """Current UTC instant, truncated to whole seconds (X.509 time precision)."""
    return datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)


def days_to_ms(days: int) -> int:
    return days * MS_PER_DAY


def b64e(b: bytes) -> str:
    """Base64-encode bytes → UTF-8 string."""
    return base64.b64encode(b).decode("utf-8")


def b64d(s: str) -> bytes:
    """Base64-decode UTF-8 string → bytes."""
    return base64.b64decode(s)

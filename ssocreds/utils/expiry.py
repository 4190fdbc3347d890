from datetime import datetime, timezone
from typing import Optional


def format_expiration(expiration: datetime, now: Optional[datetime] = None) -> str:
    """
    Format the time left until an expiration as "<H>h <M>m".

    Args:
        expiration: Expiration timestamp (naive values are treated as UTC)
        now: Reference time, defaults to the current time

    Returns:
        str: e.g. "7h 59m", or "expired" if the expiration is in the past
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if expiration.tzinfo is None:
        expiration = expiration.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    remaining = int((expiration - now).total_seconds())
    if remaining < 0:
        return "expired"

    hours, remainder = divmod(remaining, 3600)
    return f"{hours}h {remainder // 60}m"

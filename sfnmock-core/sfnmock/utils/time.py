from datetime import datetime, timezone
from typing import Callable

# source of "now" for created entities, injectable for tests
Clock = Callable[[], datetime]


def now_utc_datetime() -> datetime:
    return datetime.now(tz=timezone.utc)

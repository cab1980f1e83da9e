from __future__ import annotations

from datetime import datetime
from typing import NamedTuple

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


class TimeRemaining(NamedTuple):
    days: int
    hours: int
    minutes: int
    seconds: int

    @property
    def total_seconds(self) -> int:
        return (
            self.days * SECONDS_PER_DAY
            + self.hours * SECONDS_PER_HOUR
            + self.minutes * SECONDS_PER_MINUTE
            + self.seconds
        )

    @property
    def is_over(self) -> bool:
        return self.total_seconds == 0

    def as_dict(self):
        return self._asdict()


def time_remaining(deadline: datetime, now: datetime) -> TimeRemaining:
    """Split the time left until ``deadline`` into days/hours/minutes/seconds.

    Fractions of a second are dropped. Everything is zero once ``now`` has
    reached the deadline.
    """
    left = int((deadline - now).total_seconds())
    if left <= 0:
        return TimeRemaining(0, 0, 0, 0)

    days, left = divmod(left, SECONDS_PER_DAY)
    hours, left = divmod(left, SECONDS_PER_HOUR)
    minutes, seconds = divmod(left, SECONDS_PER_MINUTE)
    return TimeRemaining(days, hours, minutes, seconds)

"""Farewell calendar models for farewell_desk.

Calendar cells are addressed by slot keys of the form ``YYYY-MM-DD-<bucket>``,
for example ``2024-06-03-11:00`` or ``2024-06-03-EMERGENCY``.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import StrEnum

__all__ = [
    "SlotKey",
    "TimeBucket",
    "format_slot_key",
    "parse_slot_key",
    "week_slot_keys",
]

_DATE_FORMAT = "%Y-%m-%d"
_DATE_LENGTH = 10


class TimeBucket(StrEnum):
    """The four daily farewell buckets."""

    EMERGENCY = "EMERGENCY"
    """Fit-in slot with no fixed time; never auto-released."""

    MORNING = "11:00"
    EARLY_AFTERNOON = "14:00"
    LATE_AFTERNOON = "16:00"

    @property
    def start_time(self) -> time | None:
        """Time of day the farewell starts, None for the emergency bucket."""
        if self is TimeBucket.EMERGENCY:
            return None
        hours, minutes = self.value.split(":")
        return time(int(hours), int(minutes))


@dataclass(frozen=True)
class SlotKey:
    """Parsed slot key."""

    day: date
    bucket: TimeBucket

    @property
    def scheduled_datetime(self) -> datetime | None:
        start = self.bucket.start_time
        if start is None:
            return None
        return datetime.combine(self.day, start)

    def __str__(self) -> str:
        return format_slot_key(self.day, self.bucket)


def format_slot_key(day: date, bucket: TimeBucket) -> str:
    """Build the string key for a calendar cell."""
    return f"{day.strftime(_DATE_FORMAT)}-{bucket.value}"


def parse_slot_key(key: str) -> SlotKey:
    """Parse a slot key.

    Raises:
        ValueError: If the date part or the bucket is not recognised
    """
    if len(key) <= _DATE_LENGTH + 1 or key[_DATE_LENGTH] != "-":
        raise ValueError(f"Malformed slot key: {key!r}")

    day = datetime.strptime(key[:_DATE_LENGTH], _DATE_FORMAT).date()
    try:
        bucket = TimeBucket(key[_DATE_LENGTH + 1 :])
    except ValueError as e:
        raise ValueError(f"Unknown time bucket in slot key: {key!r}") from e
    return SlotKey(day=day, bucket=bucket)


def week_slot_keys(reference: date) -> list[str]:
    """All slot keys of the Monday-to-Friday week containing `reference`.

    Keys are ordered day by day, buckets in calendar display order.
    """
    monday = reference - timedelta(days=reference.weekday())
    return [
        format_slot_key(monday + timedelta(days=offset), bucket)
        for offset in range(5)
        for bucket in TimeBucket
    ]

from __future__ import annotations

import re
from datetime import date, datetime


class Conversion:
    """Utility functions for converting raw CSV cells and display values."""

    count_pattern = re.compile(r"^\s*([+-]?\d+)")
    short_months = (
        "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sept", "Oct", "Nov", "Dec",
    )

    @staticmethod
    def count_to_int(value) -> int:
        """Lenient completion-count parser.

        Reads an optional sign and the leading digits, ignoring anything
        after them (``"12 badges"`` -> 12, ``"3.9"`` -> 3). Missing, blank,
        non-numeric and negative values all come back as 0.
        """
        if value is None:
            return 0
        if isinstance(value, int) and not isinstance(value, bool):
            return max(value, 0)

        match = Conversion.count_pattern.match(str(value))
        if not match:
            return 0
        return max(int(match.group(1)), 0)

    @staticmethod
    def to_datetime(value: str | datetime | date) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        try:
            return datetime.fromisoformat(str(value).strip())
        except ValueError as exc:
            raise ValueError(f"Invalid date format: {value!r}") from exc

    @staticmethod
    def format_short_date(value) -> str:
        """Render a date like ``24 Sept 2025``; empty input gives ``''``."""
        if not value:
            return ""
        when = Conversion.to_datetime(value)
        return f"{when.day} {Conversion.short_months[when.month - 1]} {when.year}"

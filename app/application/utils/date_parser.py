from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime

DATE_TIME_PATTERN = re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{4})\s+(\d{1,2}):(\d{2})(?!\d)")

DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H:%M"


@dataclass(frozen=True)
class ParsedSlot:
    date_formatted: str  # DD/MM/YYYY
    time: str  # HH:MM
    moment: datetime


def parse_date_time(text: str) -> ParsedSlot | None:
    """Parse "D/M/YYYY H:MM" anywhere in the text. Returns None for malformed or impossible dates."""
    match = DATE_TIME_PATTERN.search(text)
    if not match:
        return None

    day, month, year, hour, minute = (int(g) for g in match.groups())
    try:
        moment = datetime(year, month, day, hour, minute)
    except ValueError:
        return None

    return ParsedSlot(
        date_formatted=moment.strftime(DATE_FORMAT),
        time=moment.strftime(TIME_FORMAT),
        moment=moment,
    )


def parse_date(date_formatted: str) -> date:
    return datetime.strptime(date_formatted, DATE_FORMAT).date()


def parse_time(time: str) -> tuple[int, int]:
    parsed = datetime.strptime(time, TIME_FORMAT)
    return (parsed.hour, parsed.minute)


def combine(date_formatted: str, time: str) -> datetime:
    return datetime.strptime(f"{date_formatted} {time}", f"{DATE_FORMAT} {TIME_FORMAT}")


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def weekday_sunday_first(value: date) -> int:
    """Weekday number with Sunday = 0 ... Saturday = 6."""
    return (value.weekday() + 1) % 7

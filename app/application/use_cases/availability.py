from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Sequence

from app.application.utils.date_parser import combine, format_date, parse_date, parse_time, weekday_sunday_first
from app.domain.entities.appointment import Appointment
from app.domain.entities.salon_config import ANY_STAFF_NAME, SalonConfig


class SlotRejection(str, Enum):
    PAST = "past"
    NON_WORKING_DAY = "non_working_day"
    OUTSIDE_HOURS = "outside_hours"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class SlotValidation:
    rejection: SlotRejection | None = None
    suggestions: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.rejection is None


class AvailabilityChecker:
    """
    Business-hours and slot checks over a config and an appointments snapshot.

    Opening hours are half-open at minute granularity: a time is inside
    business hours iff open_time <= time < close_time.
    """

    def __init__(
        self,
        config: SalonConfig,
        appointments: Sequence[Appointment],
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._config = config
        self._appointments = tuple(appointments)
        self._now = now

    def is_open_now(self) -> bool:
        now = self._now()
        if weekday_sunday_first(now.date()) not in self._config.working_days:
            return False
        return self._within_minutes(now.hour * 60 + now.minute)

    def is_in_past(self, date_formatted: str, time: str) -> bool:
        return combine(date_formatted, time) < self._now()

    def is_working_day(self, date_formatted: str) -> bool:
        return weekday_sunday_first(parse_date(date_formatted)) in self._config.working_days

    def is_within_working_hours(self, time: str) -> bool:
        hour, minute = parse_time(time)
        return self._within_minutes(hour * 60 + minute)

    def check_availability(self, staff_name: str, date_formatted: str, time: str) -> bool:
        for appointment in self._appointments:
            if not appointment.occupies(date_formatted, time):
                continue
            if staff_name == ANY_STAFF_NAME or appointment.staff.name == staff_name:
                return False
        return True

    def suggested_times(self, staff_name: str, date_formatted: str, limit: int = 3) -> list[str]:
        if limit <= 0:
            return []

        is_today = date_formatted == format_date(self._now().date())
        open_hour = self._config.open_minutes // 60
        close_hour = -(-self._config.close_minutes // 60)

        suggestions: list[str] = []
        for hour in range(open_hour, close_hour):
            for minute in (0, 30):
                slot = f"{hour:02d}:{minute:02d}"
                if not self.is_within_working_hours(slot):
                    continue
                if is_today and self.is_in_past(date_formatted, slot):
                    continue
                if not self.check_availability(staff_name, date_formatted, slot):
                    continue
                suggestions.append(slot)
                if len(suggestions) >= limit:
                    return suggestions
        return suggestions

    def validate_slot(
        self,
        staff_name: str,
        date_formatted: str,
        time: str,
        suggestion_limit: int = 3,
    ) -> SlotValidation:
        """Run the checks in fixed order and report the first failure only."""
        if self.is_in_past(date_formatted, time):
            return SlotValidation(SlotRejection.PAST)
        if not self.is_working_day(date_formatted):
            return SlotValidation(SlotRejection.NON_WORKING_DAY)
        if not self.is_within_working_hours(time):
            return SlotValidation(SlotRejection.OUTSIDE_HOURS)
        if not self.check_availability(staff_name, date_formatted, time):
            return SlotValidation(
                SlotRejection.CONFLICT,
                self.suggested_times(staff_name, date_formatted, suggestion_limit),
            )
        return SlotValidation()

    def _within_minutes(self, minute_of_day: int) -> bool:
        return self._config.open_minutes <= minute_of_day < self._config.close_minutes

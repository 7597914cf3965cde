from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


ANY_STAFF_NAME = "Indiferente"


@dataclass(frozen=True)
class Service:
    name: str
    price: Decimal
    duration_minutes: int


@dataclass(frozen=True)
class StaffMember:
    name: str
    specialty: str = ""

    @property
    def is_any(self) -> bool:
        return self.name == ANY_STAFF_NAME


ANY_STAFF = StaffMember(name=ANY_STAFF_NAME)


@dataclass(frozen=True)
class SalonConfig:
    name: str
    open_time: str  # HH:MM
    close_time: str  # HH:MM
    working_days: frozenset[int]  # 0 = Sunday
    services: tuple[Service, ...]
    staff: tuple[StaffMember, ...]

    @property
    def open_minutes(self) -> int:
        return to_minutes(self.open_time)

    @property
    def close_minutes(self) -> int:
        return to_minutes(self.close_time)


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":", 1)
    return int(hours) * 60 + int(minutes)

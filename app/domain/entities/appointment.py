from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.entities.salon_config import Service, StaffMember


@dataclass(frozen=True)
class Appointment:
    id: int
    phone: str
    date_formatted: str  # DD/MM/YYYY
    time: str  # HH:MM
    iso_date_time: datetime
    service: Service
    staff: StaffMember
    created_at: datetime

    def occupies(self, date_formatted: str, time: str) -> bool:
        return self.date_formatted == date_formatted and self.time == time

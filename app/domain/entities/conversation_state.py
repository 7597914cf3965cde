from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from app.domain.entities.salon_config import SalonConfig, Service, StaffMember


class ConversationStep(str, Enum):
    INITIAL = "initial"
    CONFIRM_BOOKING = "confirm_booking"
    SELECT_SERVICE = "select_service"
    SELECT_STAFF = "select_staff"
    SELECT_DATE_TIME = "select_date_time"
    CONFIRM_APPOINTMENT = "confirm_appointment"


@dataclass(frozen=True)
class PendingAppointment:
    service: Service | None = None
    staff: StaffMember | None = None
    date_formatted: str | None = None  # DD/MM/YYYY
    time: str | None = None  # HH:MM
    iso_date_time: datetime | None = None


@dataclass(frozen=True)
class ConversationState:
    config: SalonConfig  # snapshot taken when the conversation started
    last_activity_at: datetime
    step: ConversationStep = ConversationStep.INITIAL
    pending: PendingAppointment = field(default_factory=PendingAppointment)

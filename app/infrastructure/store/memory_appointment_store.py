from __future__ import annotations

import threading

from app.application.ports.appointment_store import AppointmentStorePort
from app.domain.entities.appointment import Appointment


class MemoryAppointmentStore(AppointmentStorePort):
    def __init__(self, appointments: list[Appointment] | None = None) -> None:
        self._appointments: list[Appointment] = list(appointments or [])
        self._lock = threading.Lock()

    def load_all(self) -> list[Appointment]:
        with self._lock:
            return list(self._appointments)

    def append(self, appointment: Appointment) -> None:
        with self._lock:
            self._appointments.append(appointment)

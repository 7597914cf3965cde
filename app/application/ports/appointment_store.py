from abc import ABC, abstractmethod

from app.domain.entities.appointment import Appointment


class AppointmentStorePort(ABC):
    @abstractmethod
    def load_all(self) -> list[Appointment]:
        """Return every confirmed appointment in creation order."""
        raise NotImplementedError

    @abstractmethod
    def append(self, appointment: Appointment) -> None:
        """
        Append and persist an appointment.
        Raises PersistenceError if the write fails; the store is unchanged in that case.
        """
        raise NotImplementedError

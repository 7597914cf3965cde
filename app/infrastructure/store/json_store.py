from __future__ import annotations

import json
import logging
import shutil
import threading
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from app.application.exceptions import PersistenceError
from app.application.ports.appointment_store import AppointmentStorePort
from app.domain.entities.appointment import Appointment
from app.domain.entities.salon_config import Service, StaffMember


class JsonAppointmentStore(AppointmentStorePort):
    """
    Appointments kept as one pretty-printed JSON array.

    The file is read once at startup and rewritten in full on every append
    (temp file + atomic rename). The in-memory list only changes after the
    write succeeded, so a failed append leaves both untouched.
    """

    def __init__(self, path: str = "./data/appointments.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)
        self._appointments: list[Appointment] = self._load()

    def _load(self) -> list[Appointment]:
        """
        Load appointments from the JSON file.

        A document that cannot be read as a list is moved aside to
        ``<name>.corrupt-<timestamp>`` and the store starts empty. Individual
        records that fail to parse are skipped; the original file is copied
        to the same backup name first so nothing is lost on the next write.
        """
        if not self._path.exists():
            return []

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            self._logger.warning(
                "Appointments file unreadable, starting empty",
                extra={"path": str(self._path), "reason": str(e)},
            )
            self._backup(move=True)
            return []

        if not isinstance(data, list):
            self._logger.warning(
                "Appointments file is not a list, starting empty",
                extra={"path": str(self._path), "reason": type(data).__name__},
            )
            self._backup(move=True)
            return []

        appointments: list[Appointment] = []
        skipped = 0
        for index, item in enumerate(data):
            try:
                appointments.append(self._deserialize(item))
            except (KeyError, TypeError, ValueError, AttributeError, InvalidOperation) as e:
                skipped += 1
                self._logger.warning(
                    "Invalid appointment record skipped",
                    extra={"path": str(self._path), "index": index, "reason": repr(e)},
                )
        if skipped:
            self._backup(move=False)

        self._logger.info("Appointments loaded", extra={"path": str(self._path), "count": len(appointments)})
        return appointments

    def _backup(self, move: bool) -> None:
        stamp = datetime.now().strftime("%Y%m%d%H%M%S%f")
        backup_path = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        try:
            if move:
                self._path.replace(backup_path)
            else:
                shutil.copyfile(self._path, backup_path)
        except OSError as e:
            self._logger.error(
                "Could not back up appointments file",
                extra={"path": str(self._path), "reason": str(e)},
            )
            return
        self._logger.warning("Appointments file backed up", extra={"path": str(backup_path)})

    def _save(self, appointments: list[Appointment]) -> None:
        """Save all appointments to the JSON file atomically."""
        temp_path = self._path.with_suffix(".json.tmp")
        data = [self._serialize(a) for a in appointments]

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Could not write {self._path}: {e}") from e

    def _serialize(self, appointment: Appointment) -> dict[str, Any]:
        return {
            "id": appointment.id,
            "phone": appointment.phone,
            "date_formatted": appointment.date_formatted,
            "time": appointment.time,
            "iso_date_time": appointment.iso_date_time.isoformat(),
            "service": {
                "name": appointment.service.name,
                "price": str(appointment.service.price),
                "duration_minutes": appointment.service.duration_minutes,
            },
            "staff": {
                "name": appointment.staff.name,
                "specialty": appointment.staff.specialty,
            },
            "created_at": appointment.created_at.isoformat(),
        }

    def _deserialize(self, data: dict[str, Any]) -> Appointment:
        service = data["service"]
        staff = data["staff"]
        return Appointment(
            id=int(data["id"]),
            phone=str(data["phone"]),
            date_formatted=data["date_formatted"],
            time=data["time"],
            iso_date_time=datetime.fromisoformat(data["iso_date_time"]),
            service=Service(
                name=service["name"],
                price=Decimal(str(service["price"])),
                duration_minutes=int(service["duration_minutes"]),
            ),
            staff=StaffMember(name=staff["name"], specialty=staff.get("specialty", "")),
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    def load_all(self) -> list[Appointment]:
        with self._lock:
            return list(self._appointments)

    def append(self, appointment: Appointment) -> None:
        with self._lock:
            updated = self._appointments + [appointment]
            self._save(updated)
            self._appointments = updated

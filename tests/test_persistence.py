"""
Tests for durable appointment storage and the salon config file.
"""

from __future__ import annotations

import json
import tempfile
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from app.application.exceptions import PersistenceError, SalonConfigError
from app.application.utils.ids import MonotonicIdGenerator
from app.domain.entities.appointment import Appointment
from app.domain.entities.salon_config import ANY_STAFF, Service, StaffMember
from app.infrastructure.config.json_salon_config import JsonSalonConfigStore
from app.infrastructure.store.json_store import JsonAppointmentStore


def _appointment(appt_id: int, time: str = "10:00", staff: StaffMember | None = None) -> Appointment:
    return Appointment(
        id=appt_id,
        phone="34600000001",
        date_formatted="21/10/2026",
        time=time,
        iso_date_time=datetime.strptime(f"21/10/2026 {time}", "%d/%m/%Y %H:%M"),
        service=Service(name="Manicura", price=Decimal("18.50"), duration_minutes=30),
        staff=staff or StaffMember(name="María", specialty="Color"),
        created_at=datetime(2026, 10, 19, 10, 0, 12),
    )


def _salon_document() -> dict:
    return {
        "name": "Salón Bella",
        "open_time": "09:00",
        "close_time": "20:00",
        "working_days": [1, 2, 3, 4, 5, 6],
        "services": [{"name": "Corte", "price": 25, "duration_minutes": 45}],
        "staff": [{"name": "María", "specialty": "Color"}],
    }


def _write_config(tmpdir: str, document: dict) -> Path:
    path = Path(tmpdir) / "salon.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_appointments_round_trip_in_order():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(Path(tmpdir) / "appointments.json")
        store = JsonAppointmentStore(path=path)
        originals = [_appointment(1, "10:00"), _appointment(2, "10:30", ANY_STAFF), _appointment(3, "11:00")]

        for appt in originals:
            store.append(appt)

        reloaded = JsonAppointmentStore(path=path).load_all()
        assert reloaded == originals


def test_appointments_file_is_a_json_array():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "appointments.json"
        store = JsonAppointmentStore(path=str(path))
        store.append(_appointment(7))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert isinstance(data, list)
        assert data[0]["id"] == 7
        assert data[0]["service"]["price"] == "18.50"
        assert data[0]["staff"]["name"] == "María"


def test_missing_or_corrupt_file_starts_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        missing = Path(tmpdir) / "nested" / "appointments.json"
        assert JsonAppointmentStore(path=str(missing)).load_all() == []

        corrupt = Path(tmpdir) / "corrupt.json"
        corrupt.write_text("{not json", encoding="utf-8")
        assert JsonAppointmentStore(path=str(corrupt)).load_all() == []

        wrong_shape = Path(tmpdir) / "object.json"
        wrong_shape.write_text('{"citas": []}', encoding="utf-8")
        assert JsonAppointmentStore(path=str(wrong_shape)).load_all() == []

        bad_record = Path(tmpdir) / "bad_record.json"
        bad_record.write_text('[{"id": 1}]', encoding="utf-8")
        assert JsonAppointmentStore(path=str(bad_record)).load_all() == []


def test_invalid_record_is_skipped_and_valid_ones_survive_next_write():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "appointments.json"
        store = JsonAppointmentStore(path=str(path))
        store.append(_appointment(1, "10:00"))
        store.append(_appointment(2, "10:30"))

        data = json.loads(path.read_text(encoding="utf-8"))
        del data[1]["created_at"]
        path.write_text(json.dumps(data), encoding="utf-8")
        damaged = path.read_text(encoding="utf-8")

        reopened = JsonAppointmentStore(path=str(path))
        assert [a.id for a in reopened.load_all()] == [1]

        reopened.append(_appointment(3, "11:00"))
        on_disk = json.loads(path.read_text(encoding="utf-8"))
        assert [item["id"] for item in on_disk] == [1, 3]

        backups = list(Path(tmpdir).glob("appointments.json.corrupt-*"))
        assert len(backups) == 1
        assert backups[0].read_text(encoding="utf-8") == damaged


def test_unreadable_file_is_moved_aside_before_starting_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "appointments.json"
        path.write_text('[{"id": 1, "phone": "346', encoding="utf-8")

        store = JsonAppointmentStore(path=str(path))

        assert store.load_all() == []
        assert not path.exists()
        backups = list(Path(tmpdir).glob("appointments.json.corrupt-*"))
        assert len(backups) == 1
        assert backups[0].read_text(encoding="utf-8") == '[{"id": 1, "phone": "346'

        store.append(_appointment(5))
        assert [item["id"] for item in json.loads(path.read_text(encoding="utf-8"))] == [5]
        assert backups[0].exists()


def test_failed_write_raises_and_keeps_previous_data():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "appointments.json"
        store = JsonAppointmentStore(path=str(path))
        store.append(_appointment(1))
        before = path.read_text(encoding="utf-8")

        with patch("app.infrastructure.store.json_store.json.dump", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError):
                store.append(_appointment(2, "11:00"))

        assert [a.id for a in store.load_all()] == [1]
        assert path.read_text(encoding="utf-8") == before
        assert not path.with_suffix(".json.tmp").exists()


def test_id_generator_is_strictly_increasing():
    far_future = 10**15
    ids = MonotonicIdGenerator(last_id=far_future)

    first = ids.next_id()
    second = ids.next_id()

    assert far_future < first < second


def test_salon_config_loads_and_validates():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = JsonSalonConfigStore(path=str(_write_config(tmpdir, _salon_document()))).get_config()

        assert config.name == "Salón Bella"
        assert config.working_days == frozenset({1, 2, 3, 4, 5, 6})
        assert config.services[0].price == Decimal("25")
        assert config.staff[0].name == "María"
        assert config.open_minutes == 9 * 60
        assert config.close_minutes == 20 * 60


@pytest.mark.parametrize(
    "override",
    [
        {"open_time": "20:00", "close_time": "09:00"},
        {"open_time": "9:00"},
        {"working_days": [7]},
        {"services": []},
        {"staff": []},
    ],
)
def test_invalid_salon_config_is_rejected(override):
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_config(tmpdir, {**_salon_document(), **override})
        with pytest.raises(SalonConfigError):
            JsonSalonConfigStore(path=str(path))


def test_missing_salon_config_is_an_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(SalonConfigError):
            JsonSalonConfigStore(path=str(Path(tmpdir) / "nope.json"))


def test_override_is_shallow_merged_and_written_back():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_config(tmpdir, _salon_document())
        store = JsonSalonConfigStore(path=str(path))

        updated = store.apply_override({"name": "Salón Nuevo", "close_time": "21:00"})

        assert updated.name == "Salón Nuevo"
        assert updated.close_time == "21:00"
        assert updated.services == store.get_config().services
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["name"] == "Salón Nuevo"
        assert saved["staff"] == _salon_document()["staff"]
        assert JsonSalonConfigStore(path=str(path)).get_config().close_time == "21:00"


def test_invalid_override_leaves_config_untouched():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_config(tmpdir, _salon_document())
        store = JsonSalonConfigStore(path=str(path))
        before = path.read_text(encoding="utf-8")

        with pytest.raises(SalonConfigError):
            store.apply_override({"close_time": "08:00"})

        assert store.get_config().close_time == "20:00"
        assert path.read_text(encoding="utf-8") == before

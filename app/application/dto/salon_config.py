from __future__ import annotations

import re
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.domain.entities.salon_config import SalonConfig, Service, StaffMember


_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class ServiceDTO(BaseModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    duration_minutes: int = Field(gt=0)


class StaffMemberDTO(BaseModel):
    name: str = Field(min_length=1)
    specialty: str = ""


class SalonConfigDTO(BaseModel):
    name: str = Field(min_length=1)
    open_time: str
    close_time: str
    working_days: list[int] = Field(min_length=1)
    services: list[ServiceDTO] = Field(min_length=1)
    staff: list[StaffMemberDTO] = Field(min_length=1)

    @field_validator("open_time", "close_time")
    @classmethod
    def _check_hhmm(cls, value: str) -> str:
        if not _HHMM.match(value):
            raise ValueError("expected HH:MM (24h)")
        return value

    @field_validator("working_days")
    @classmethod
    def _check_days(cls, value: list[int]) -> list[int]:
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("working days must be between 0 (Sunday) and 6 (Saturday)")
        return value

    @model_validator(mode="after")
    def _check_hours(self) -> "SalonConfigDTO":
        # zero-padded HH:MM compares correctly as text
        if self.open_time >= self.close_time:
            raise ValueError("open_time must be earlier than close_time")
        return self

    def to_entity(self) -> SalonConfig:
        return SalonConfig(
            name=self.name,
            open_time=self.open_time,
            close_time=self.close_time,
            working_days=frozenset(self.working_days),
            services=tuple(
                Service(name=s.name, price=s.price, duration_minutes=s.duration_minutes) for s in self.services
            ),
            staff=tuple(StaffMember(name=m.name, specialty=m.specialty) for m in self.staff),
        )

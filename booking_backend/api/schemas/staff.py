from datetime import time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateStaffAvailabilityRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    staff_member_id: UUID
    day_of_week: int = Field(ge=0, le=6)  # 0=Sunday
    start_time: str = Field(pattern=r"^([0-1][0-9]|2[0-3]):[0-5][0-9]:[0-5][0-9]$")
    end_time: str = Field(pattern=r"^([0-1][0-9]|2[0-3]):[0-5][0-9]:[0-5][0-9]$")

    def start(self) -> time:
        return time.fromisoformat(self.start_time)

    def end(self) -> time:
        return time.fromisoformat(self.end_time)


class CreateStaffAvailabilityResponse(BaseModel):
    staff_availability_id: str


class StaffAvailabilityPublic(BaseModel):
    staff_availability_id: str
    day_of_week: int
    start_time: str
    end_time: str


class AssignStaffServiceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    bookable_item_id: UUID


class StaffServicePublic(BaseModel):
    staff_member_id: str
    bookable_item_id: str
    bookable_item_name: str
    bookable_item_type_code: str
    bookable_item_duration: str


class StaffServiceListResponse(BaseModel):
    total: int
    services: list[StaffServicePublic]


class StaffWindow(BaseModel):
    day_of_week: int
    start_time: str
    end_time: str


class AvailableStaffMember(BaseModel):
    staff_member_id: str
    staff_member_name: str
    availability: StaffWindow

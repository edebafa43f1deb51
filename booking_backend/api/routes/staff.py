from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.api.deps import get_session, require_api_key
from booking_backend.api.schemas.staff import (
    AssignStaffServiceRequest,
    AvailableStaffMember,
    CreateStaffAvailabilityRequest,
    CreateStaffAvailabilityResponse,
    StaffAvailabilityPublic,
    StaffServiceListResponse,
    StaffServicePublic,
    StaffWindow,
)
from booking_backend.core.errors import BadRequestError
from booking_backend.services.staff_assignment_service import (
    assign_service_to_staff,
    list_staff_services,
    remove_service_from_staff,
)
from booking_backend.services.staff_availability_service import (
    create_staff_availability,
    find_available_staff,
    list_staff_availability,
)

router = APIRouter(prefix="/staff", tags=["staff"], dependencies=[Depends(require_api_key)])


@router.post(
    "/availability",
    response_model=CreateStaffAvailabilityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_availability(
    body: CreateStaffAvailabilityRequest,
    session: AsyncSession = Depends(get_session),
) -> CreateStaffAvailabilityResponse:
    availability = await create_staff_availability(
        session,
        str(body.staff_member_id),
        body.day_of_week,
        body.start(),
        body.end(),
    )
    return CreateStaffAvailabilityResponse(staff_availability_id=availability.staff_availability_id)


@router.get("/available", response_model=list[AvailableStaffMember])
async def available_staff(
    business_id: str | None = Query(None),
    bookable_item_id: str | None = Query(None),
    start_datetime: datetime | None = Query(None),
    end_datetime: datetime | None = Query(None),
    session: AsyncSession = Depends(get_session),
) -> list[AvailableStaffMember]:
    """Staff who can provide the item and are free for the whole window."""
    if not business_id or not bookable_item_id or start_datetime is None or end_datetime is None:
        raise BadRequestError(
            "Missing required parameters: business_id, bookable_item_id, start_datetime and end_datetime"
        )
    rows = await find_available_staff(session, business_id, bookable_item_id, start_datetime, end_datetime)
    return [
        AvailableStaffMember(
            staff_member_id=staff.staff_member_id,
            staff_member_name=staff.staff_member_name,
            availability=StaffWindow(
                day_of_week=a.day_of_week,
                start_time=a.start_time.isoformat(),
                end_time=a.end_time.isoformat(),
            ),
        )
        for staff, a in rows
    ]


@router.get("/{staff_member_id}/availability", response_model=list[StaffAvailabilityPublic])
async def get_availability(
    staff_member_id: str,
    session: AsyncSession = Depends(get_session),
) -> list[StaffAvailabilityPublic]:
    rules = await list_staff_availability(session, staff_member_id)
    return [
        StaffAvailabilityPublic(
            staff_availability_id=a.staff_availability_id,
            day_of_week=a.day_of_week,
            start_time=a.start_time.isoformat(),
            end_time=a.end_time.isoformat(),
        )
        for a in rules
    ]


@router.post("/{staff_member_id}/services", status_code=status.HTTP_204_NO_CONTENT)
async def add_staff_service(
    staff_member_id: str,
    body: AssignStaffServiceRequest,
    session: AsyncSession = Depends(get_session),
) -> None:
    await assign_service_to_staff(session, staff_member_id, str(body.bookable_item_id))


@router.get("/{staff_member_id}/services", response_model=StaffServiceListResponse)
async def get_staff_services(
    staff_member_id: str,
    session: AsyncSession = Depends(get_session),
) -> StaffServiceListResponse:
    items = await list_staff_services(session, staff_member_id)
    return StaffServiceListResponse(
        total=len(items),
        services=[
            StaffServicePublic(
                staff_member_id=staff_member_id,
                bookable_item_id=i.bookable_item_id,
                bookable_item_name=i.bookable_item_name,
                bookable_item_type_code=i.bookable_item_type_code,
                bookable_item_duration=i.bookable_item_duration,
            )
            for i in items
        ],
    )


@router.delete("/{staff_member_id}/services/{bookable_item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_staff_service(
    staff_member_id: str,
    bookable_item_id: str,
    session: AsyncSession = Depends(get_session),
) -> None:
    await remove_service_from_staff(session, staff_member_id, bookable_item_id)

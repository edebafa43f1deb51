import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.core.errors import BadRequestError, NotFoundError
from booking_backend.models.bookable_item import BookableItem
from booking_backend.models.staff import StaffMember, StaffService

logger = logging.getLogger(__name__)


async def _get_staff_member(session: AsyncSession, staff_member_id: str) -> StaffMember:
    staff = await session.get(StaffMember, staff_member_id)
    if staff is None:
        raise NotFoundError.for_resource("Staff member", staff_member_id)
    return staff


async def can_provide(session: AsyncSession, staff_member_id: str, bookable_item_id: str) -> bool:
    return await session.get(StaffService, (staff_member_id, bookable_item_id)) is not None


async def assign_service_to_staff(
    session: AsyncSession, staff_member_id: str, bookable_item_id: str
) -> StaffService:
    """Let a staff member provide a bookable item of the same business."""
    staff = await _get_staff_member(session, staff_member_id)
    item = await session.get(BookableItem, bookable_item_id)
    if item is None:
        raise NotFoundError.for_resource("Bookable item", bookable_item_id)
    if item.business_id != staff.business_id:
        raise BadRequestError(
            "Staff member and bookable item belong to different businesses",
            details={"staff_member_id": staff_member_id, "bookable_item_id": bookable_item_id},
        )
    if await can_provide(session, staff_member_id, bookable_item_id):
        raise BadRequestError("Staff member already provides this bookable item")

    link = StaffService(staff_member_id=staff_member_id, bookable_item_id=bookable_item_id)
    session.add(link)
    await session.flush()
    logger.info("Staff member %s can now provide %s", staff_member_id, bookable_item_id)
    return link


async def list_staff_services(session: AsyncSession, staff_member_id: str) -> list[BookableItem]:
    await _get_staff_member(session, staff_member_id)
    result = await session.execute(
        select(BookableItem)
        .join(StaffService, StaffService.bookable_item_id == BookableItem.bookable_item_id)
        .where(StaffService.staff_member_id == staff_member_id)
        .order_by(BookableItem.bookable_item_name)
    )
    return list(result.scalars().all())


async def remove_service_from_staff(session: AsyncSession, staff_member_id: str, bookable_item_id: str) -> None:
    result = await session.execute(
        delete(StaffService).where(
            StaffService.staff_member_id == staff_member_id,
            StaffService.bookable_item_id == bookable_item_id,
        )
    )
    if not result.rowcount:
        raise NotFoundError(
            "Staff member does not provide this bookable item",
            details={"staff_member_id": staff_member_id, "bookable_item_id": bookable_item_id},
        )

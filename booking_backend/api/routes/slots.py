from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.api.deps import get_session, require_api_key
from booking_backend.core.errors import BadRequestError
from booking_backend.models.slot import AvailableSlot
from booking_backend.services.slot_service import compute_available_slots

router = APIRouter(prefix="/bookable_items", tags=["slots"], dependencies=[Depends(require_api_key)])


@router.get("/{bookable_item_id}/available_slots", response_model=list[AvailableSlot])
async def available_slots(
    bookable_item_id: str,
    start_date: str | None = Query(None),
    end_date: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
) -> list[AvailableSlot]:
    """Free slots between start_date and end_date (YYYY-MM-DD, inclusive)."""
    if not start_date or not end_date:
        raise BadRequestError("Missing required parameters: start_date and end_date")
    return await compute_available_slots(session, bookable_item_id, start_date, end_date)

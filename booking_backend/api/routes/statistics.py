from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from booking_backend.api.deps import get_session, require_api_key
from booking_backend.api.schemas.statistics import BusinessInsightsResponse, BusinessStatisticsResponse
from booking_backend.core.errors import BadRequestError
from booking_backend.services.slot_service import parse_date_param
from booking_backend.services.statistics_service import get_business_insights, get_business_statistics

router = APIRouter(prefix="/businesses", tags=["statistics"], dependencies=[Depends(require_api_key)])


def _date_range(start_date: str | None, end_date: str | None):
    if not start_date or not end_date:
        raise BadRequestError("Missing required parameters: start_date and end_date")
    return parse_date_param(start_date, "start_date"), parse_date_param(end_date, "end_date")


@router.get("/{business_id}/statistics", response_model=BusinessStatisticsResponse)
async def business_statistics(
    business_id: str,
    start_date: str | None = Query(None),
    end_date: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
) -> BusinessStatisticsResponse:
    first, last = _date_range(start_date, end_date)
    stats = await get_business_statistics(session, business_id, first, last)
    return BusinessStatisticsResponse(**stats)


@router.get("/{business_id}/insights", response_model=BusinessInsightsResponse)
async def business_insights(
    business_id: str,
    start_date: str | None = Query(None),
    end_date: str | None = Query(None),
    limit: int = Query(5, ge=1, le=50),
    session: AsyncSession = Depends(get_session),
) -> BusinessInsightsResponse:
    first, last = _date_range(start_date, end_date)
    insights = await get_business_insights(session, business_id, first, last, limit=limit)
    return BusinessInsightsResponse(**insights)

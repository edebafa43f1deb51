from pydantic import BaseModel


class DailyStatistics(BaseModel):
    date: str  # YYYY-MM-DD
    total_revenue: float
    total_bookings: int


class BusinessStatisticsResponse(BaseModel):
    start_date: str
    end_date: str
    total_revenue: float
    total_bookings: int
    daily_statistics: list[DailyStatistics]


class PopularItem(BaseModel):
    bookable_item_id: str
    bookable_item_name: str | None = None
    booking_count: int
    total_revenue: float


class PeakDay(BaseModel):
    day_of_week: int  # 1=Monday .. 7=Sunday
    booking_count: int


class PeakHour(BaseModel):
    hour: int
    booking_count: int


class BusinessInsightsResponse(BaseModel):
    popular_items: list[PopularItem]
    peak_booking_days: list[PeakDay]
    peak_booking_hours: list[PeakHour]

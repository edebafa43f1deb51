from booking_backend.models.business import Business, BusinessHours
from booking_backend.models.bookable_item import BookableItem, BookableItemType
from booking_backend.models.booking import Booking, BookingCreate, BookingPublic, BookingStatus
from booking_backend.models.slot import AvailableSlot
from booking_backend.models.staff import StaffAvailability, StaffMember, StaffService

__all__ = [
    "Business",
    "BusinessHours",
    "BookableItem",
    "BookableItemType",
    "Booking",
    "BookingCreate",
    "BookingPublic",
    "BookingStatus",
    "AvailableSlot",
    "StaffMember",
    "StaffAvailability",
    "StaffService",
]

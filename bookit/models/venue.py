from typing import List, Optional

from pydantic import BaseModel

from bookit.models.host_request import AvailabilitySlot
from bookit.models.seat import Seat


class VenueResponse(BaseModel):
    venue_id: str
    host_request_id: Optional[str] = None
    venue_name: str
    business_type: str
    contact_person: str
    email: str
    phone: str
    address: str
    city: str
    map_link: str = ""
    website: str = ""
    description: str
    status: str
    submitted_by_email: str
    capacity: int = 0
    amenities: str = ""
    price_per_hour: float = 0
    images: List[str] = []
    seats: List[Seat] = []
    availability_slots: List[AvailabilitySlot] = []
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class BookingHistoryEntry(BaseModel):
    type: str = "venue"
    venue_id: str
    venue_name: str
    seat_id: int
    seat_label: str = ""
    booking_id: Optional[str] = None
    date: str
    start_time: str
    end_time: Optional[str] = None
    hours: float
    price_per_hour: float
    total_price: float
    address: str = ""
    city: str = ""
    user_email: Optional[str] = None
    booking_type: str = "user"
    booked_at: Optional[str] = None


class BookingSummary(BaseModel):
    total_bookings: int
    total_revenue: float
    venue_bookings: int
    unique_users: int


class AllBookingsResponse(BaseModel):
    bookings: List[BookingHistoryEntry]
    summary: BookingSummary

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class Booking(BaseModel):
    booking_id: Optional[str] = None
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    start_time: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")
    end_time: Optional[str] = None
    hours: float = Field(..., gt=0)
    created_by: Literal["user", "owner"] = "owner"
    created_by_email: Optional[str] = None
    created_at: Optional[str] = None


class Seat(BaseModel):
    id: int = Field(..., ge=1)
    label: str = ""
    price: float = Field(0, ge=0)
    bookings: List[Booking] = []


class SeatInput(BaseModel):
    """Seat as edited by the owner, bookings are optional"""
    id: int = Field(..., ge=1)
    label: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    bookings: List[Booking] = []


class SeatBookingRequest(BaseModel):
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    start_time: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")
    hours: float = Field(..., gt=0)
    seat_ids: List[int] = Field(..., min_length=1)


class OwnerBookingRequest(BaseModel):
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    start_time: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")
    hours: float = Field(..., gt=0)


class SeatBooking(Booking):
    seat_id: int


class SeatBookingResponse(BaseModel):
    message: str
    venue_id: str
    bookings: List[SeatBooking]

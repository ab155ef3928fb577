from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from bookit.models.seat import Booking, Seat, SeatInput


class AvailabilitySlot(BaseModel):
    date: str
    start_time: str
    end_time: str
    available_seats: int = 0


class HostRequestCreate(BaseModel):
    venue_name: str = Field(..., min_length=1)
    business_type: str = Field(..., min_length=1)
    contact_person: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    map_link: str = ""
    website: str = ""
    amenities: str = ""
    capacity: int = Field(0, ge=0)
    price_per_hour: float = Field(0, ge=0)
    images: List[str] = []


class HostRequestUpdate(BaseModel):
    """Owner edit, only the fields that are sent get applied"""
    venue_name: Optional[str] = None
    business_type: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    map_link: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)
    amenities: Optional[str] = None
    price_per_hour: Optional[float] = Field(None, ge=0)
    images: Optional[List[str]] = None
    availability_slots: Optional[List[AvailabilitySlot]] = None
    seats: Optional[List[SeatInput]] = None


class StatusUpdate(BaseModel):
    status: Literal["pending", "approved", "rejected"]


class HostRequestResponse(BaseModel):
    host_request_id: str
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
    version: int = 0


class HostRequestCreated(BaseModel):
    id: str
    message: str


class HostRequestMutation(BaseModel):
    message: str
    venue: HostRequestResponse


class OwnerBookingResponse(HostRequestMutation):
    booking: Booking

from fastapi import APIRouter, Depends, Path

from bookit.auth import CurrentUser, get_current_user
from bookit.booking_rules import add_owner_booking, remove_owner_booking
from bookit.database import get_db_client
from bookit.documents import find_venues_for_host_request, get_owned_host_request, save_document
from bookit.models.host_request import OwnerBookingResponse
from bookit.models.seat import OwnerBookingRequest
from bookit.seat_merge import desired_seat_count, is_user_booking, normalize_seats, seats_by_id
from bookit.sync import sync_venue_from_host_request

router = APIRouter(prefix="/host/my-requests", tags=["owner-bookings"])


def _known_bookings(db, host_request, seats, seat_id):
    """Every booking on a seat: the host copy plus the venue's user bookings"""
    bookings = list((seats_by_id(seats).get(seat_id) or {}).get("bookings") or [])
    for venue in find_venues_for_host_request(db, host_request["host_request_id"]):
        venue_seat = seats_by_id(venue.get("seats")).get(seat_id) or {}
        bookings.extend(b for b in venue_seat.get("bookings") or [] if is_user_booking(b))
    return bookings


@router.post(
    "/{host_request_id}/seats/{seat_id}/bookings",
    response_model=OwnerBookingResponse,
    status_code=201,
)
async def create_owner_booking(
    booking_request: OwnerBookingRequest,
    host_request_id: str = Path(..., description="The host request ID"),
    seat_id: int = Path(..., ge=1, description="The 1-based seat ID"),
    user: CurrentUser = Depends(get_current_user),
    db=Depends(get_db_client),
):
    """Block a time slot on a seat, it may not overlap any existing booking"""
    host_request = get_owned_host_request(db, host_request_id, user.email)

    seats = host_request.get("seats") or []
    seats = normalize_seats(seats, desired_seat_count(host_request.get("capacity"), seats))

    seats, booking = add_owner_booking(
        seats,
        seat_id,
        booking_request.date,
        booking_request.start_time,
        booking_request.hours,
        user.email,
        occupied=_known_bookings(db, host_request, seats, seat_id),
    )
    host_request["seats"] = seats
    saved = save_document(db, host_request)

    merged = sync_venue_from_host_request(db, saved)
    if merged is not None:
        saved["seats"] = merged

    return OwnerBookingResponse(message="Booking added", venue=saved, booking=booking)


@router.delete(
    "/{host_request_id}/seats/{seat_id}/bookings/{booking_ref}",
    response_model=OwnerBookingResponse,
)
async def delete_owner_booking(
    host_request_id: str = Path(..., description="The host request ID"),
    seat_id: int = Path(..., ge=1, description="The 1-based seat ID"),
    booking_ref: str = Path(..., description="The booking ID, or its position on the seat"),
    user: CurrentUser = Depends(get_current_user),
    db=Depends(get_db_client),
):
    """Remove an owner booking; bookings made by users can't be removed here"""
    host_request = get_owned_host_request(db, host_request_id, user.email)

    seats, booking = remove_owner_booking(host_request.get("seats") or [], seat_id, booking_ref)
    host_request["seats"] = seats
    saved = save_document(db, host_request)

    merged = sync_venue_from_host_request(db, saved)
    if merged is not None:
        saved["seats"] = merged

    return OwnerBookingResponse(message="Booking removed", venue=saved, booking=booking)

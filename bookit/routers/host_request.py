from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Path, Query
from loguru import logger

from bookit.auth import CurrentUser, get_current_user
from bookit.booking_rules import booking_window, check_owner_bookings, display_end_time
from bookit.database import get_db_client
from bookit.documents import (
    HOST_REQUEST_SK,
    delete_document,
    find_venues_for_host_request,
    get_owned_host_request,
    list_host_requests,
    save_document,
)
from bookit.models.host_request import (
    HostRequestCreate,
    HostRequestCreated,
    HostRequestMutation,
    HostRequestResponse,
    HostRequestUpdate,
)
from bookit.projection import cascade_delete
from bookit.seat_merge import OWNER, is_user_booking, merge_seat_arrays, normalize_seats, seats_by_id
from bookit.sync import sync_venue_from_host_request
from bookit.utils import generate_booking_id, generate_host_request_id, get_current_timestamp

router = APIRouter(tags=["host-requests"])


def _prepare_owner_seats(seats: List[Dict[str, Any]], email: str) -> List[Dict[str, Any]]:
    """Give bookings typed in by the owner an id and a derived end time"""
    for seat in seats:
        for booking in seat.get("bookings") or []:
            if booking.get("created_by") != OWNER:
                continue
            if not booking.get("booking_id"):
                booking["booking_id"] = generate_booking_id()
                booking["created_at"] = get_current_timestamp()
            if not booking.get("created_by_email"):
                booking["created_by_email"] = email
            _, end_min = booking_window(booking["start_time"], booking["hours"])
            booking["end_time"] = display_end_time(end_min)
    return seats


def _user_bookings_by_seat(db, host_request_id, stored_seats):
    """User bookings per seat from the stored host copy and every linked venue"""
    found = {}
    copies = [stored_seats] + [venue.get("seats") for venue in find_venues_for_host_request(db, host_request_id)]
    for seats in copies:
        for seat_id, seat in seats_by_id(seats).items():
            found.setdefault(seat_id, []).extend(b for b in seat.get("bookings") or [] if is_user_booking(b))
    return found


@router.post("/host/requests", response_model=HostRequestCreated, status_code=201)
async def submit_host_request(
    request_data: HostRequestCreate,
    user: CurrentUser = Depends(get_current_user),
    db=Depends(get_db_client),
):
    """Submit a venue for moderation"""
    host_request_id = generate_host_request_id()

    host_request = {
        "pk": host_request_id,
        "sk": HOST_REQUEST_SK,
        "host_request_id": host_request_id,
        **request_data.model_dump(),
        "status": "pending",
        "submitted_by_email": user.email,
        "seats": normalize_seats([], request_data.capacity),
        "availability_slots": [],
        "version": 0,
    }
    save_document(db, host_request)
    logger.info(f"Host request {host_request_id} submitted by {user.email}")

    return HostRequestCreated(id=host_request_id, message="Host registration submitted successfully")


@router.get("/host/my-requests", response_model=List[HostRequestResponse])
async def get_my_host_requests(
    status: str = Query("approved", description="Status to list, or 'all'"),
    user: CurrentUser = Depends(get_current_user),
    db=Depends(get_db_client),
):
    """Get the caller's host requests, approved ones by default"""
    filters = {"submitted_by_email": user.email}
    if status != "all":
        filters["status"] = status
    return list_host_requests(db, **filters)


@router.get("/host/my-requests/{host_request_id}", response_model=HostRequestResponse)
async def get_my_host_request(
    host_request_id: str = Path(..., description="The host request ID"),
    user: CurrentUser = Depends(get_current_user),
    db=Depends(get_db_client),
):
    return get_owned_host_request(db, host_request_id, user.email)


@router.put("/host/my-requests/{host_request_id}", response_model=HostRequestMutation)
async def update_my_host_request(
    update: HostRequestUpdate,
    host_request_id: str = Path(..., description="The host request ID"),
    user: CurrentUser = Depends(get_current_user),
    db=Depends(get_db_client),
):
    """Edit a host request and push the seat changes to its public venue.

    Seats sent by the owner carry labels, prices and owner bookings. User
    bookings are never taken from the request body: they are kept from the
    stored copy and, when the venue is published, from the venue itself.
    """
    host_request = get_owned_host_request(db, host_request_id, user.email)

    host_request.update(update.model_dump(exclude_unset=True, exclude_none=True, exclude={"seats"}))

    stored_seats = host_request.get("seats") or []
    if update.seats is not None:
        incoming = _prepare_owner_seats([seat.model_dump() for seat in update.seats], user.email)
        check_owner_bookings(incoming, _user_bookings_by_seat(db, host_request_id, stored_seats))
    else:
        incoming = stored_seats

    host_request["seats"] = merge_seat_arrays(
        incoming,
        stored_seats,
        host_request.get("capacity") or 0,
        host_request.get("price_per_hour") or 0,
    )
    saved = save_document(db, host_request)

    merged = sync_venue_from_host_request(db, saved)
    if merged is not None:
        saved["seats"] = merged

    return HostRequestMutation(message="Venue updated successfully", venue=saved)


@router.delete("/host/my-requests/{host_request_id}")
async def delete_my_host_request(
    host_request_id: str = Path(..., description="The host request ID"),
    user: CurrentUser = Depends(get_current_user),
    db=Depends(get_db_client),
):
    """Delete a host request together with its public venue"""
    host_request = get_owned_host_request(db, host_request_id, user.email)
    delete_document(db, host_request)
    deleted_venues = cascade_delete(db, host_request_id)

    return {"message": "Venue deleted successfully", "deleted_venues": deleted_venues}

from typing import List

from fastapi import APIRouter, Depends, Path
from loguru import logger

from bookit.auth import CurrentUser, get_current_user
from bookit.booking_rules import book_seats
from bookit.database import get_db_client
from bookit.documents import get_host_request, get_venue, list_venues, save_document
from bookit.exceptions import NotFoundError
from bookit.history import collect_venue_bookings
from bookit.models.seat import SeatBookingRequest, SeatBookingResponse
from bookit.models.venue import BookingHistoryEntry, VenueResponse
from bookit.projection import APPROVED, pull_forward
from bookit.seat_merge import desired_seat_count, normalize_seats
from bookit.sync import sync_host_request_from_venue

router = APIRouter(prefix="/api", tags=["venues"])


def get_published_venue(db, venue_id: str):
    venue = get_venue(db, venue_id)
    if not venue or venue.get("status") != APPROVED:
        raise NotFoundError("Venue not found")
    return venue


@router.get("/venues", response_model=List[VenueResponse])
async def get_venues(db=Depends(get_db_client)):
    """Get all approved venues"""
    return list_venues(db, status=APPROVED)


@router.get("/venues/{venue_id}", response_model=VenueResponse)
async def get_venue_by_id(
    venue_id: str = Path(..., description="The venue ID"),
    db=Depends(get_db_client),
):
    """Get a venue, refreshed from its host request when that one is newer"""
    venue = get_published_venue(db, venue_id)

    if venue.get("host_request_id"):
        host_request = get_host_request(db, venue["host_request_id"])
        if host_request:
            refreshed, changed = pull_forward(venue, host_request)
            if changed:
                try:
                    refreshed = save_document(db, refreshed)
                except Exception as e:
                    logger.warning(f"Failed to persist refreshed venue {venue_id}: {e}")
            venue = refreshed

    return venue


@router.post("/venues/{venue_id}/book-seats", response_model=SeatBookingResponse)
async def book_venue_seats(
    booking_request: SeatBookingRequest,
    venue_id: str = Path(..., description="The venue ID"),
    user: CurrentUser = Depends(get_current_user),
    db=Depends(get_db_client),
):
    """Book a time slot on one or more seats, all of them or none"""
    venue = get_published_venue(db, venue_id)

    seats = venue.get("seats") or []
    seats = normalize_seats(seats, desired_seat_count(venue.get("capacity"), seats))

    venue["seats"], created = book_seats(
        seats,
        booking_request.seat_ids,
        booking_request.date,
        booking_request.start_time,
        booking_request.hours,
        user.email,
    )
    saved = save_document(db, venue)
    logger.info(f"{user.email} booked seats {booking_request.seat_ids} at venue {venue_id}")

    # Host management sees live bookings through the host request copy
    sync_host_request_from_venue(db, saved)

    return SeatBookingResponse(message="Seats booked successfully", venue_id=venue_id, bookings=created)


@router.get("/bookings/history", response_model=List[BookingHistoryEntry])
async def get_booking_history(
    user: CurrentUser = Depends(get_current_user),
    db=Depends(get_db_client),
):
    """Get the caller's venue bookings, most recent first"""
    return collect_venue_bookings(list_venues(db), email=user.email, user_only=True)

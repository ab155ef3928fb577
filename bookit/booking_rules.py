"""Time-slot arithmetic and booking conflict rules for seats.

Times are minutes from midnight. A booking occupies the half-open interval
``[start, start + hours * 60)`` on its date; the interval is never wrapped at
24:00, only the displayed ``end_time`` is.
"""

import copy
import re
from typing import Any, Dict, List, Optional, Tuple

from bookit.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from bookit.seat_merge import OWNER, USER, is_owner_booking, seats_by_id
from bookit.utils import generate_booking_id, get_current_timestamp

DEFAULT_BOOKING_HOURS = 1

SEAT_NOT_FOUND = "Seat not found"
SEAT_ALREADY_BOOKED = "Seat already booked for selected time"

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_clock(value: str) -> int:
    """Convert "HH:MM" to minutes from midnight"""
    match = _CLOCK_RE.match(str(value or "").strip())
    if not match:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    return hour * 60 + minute


def validate_date(value: str) -> str:
    if not _DATE_RE.match(str(value or "")):
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD")
    return value


def booking_window(start_time: str, hours: float) -> Tuple[int, float]:
    """Start and end minute of a booking, end is neither capped at midnight nor rounded"""
    if hours is None or hours <= 0:
        raise ValidationError("hours must be a positive number")
    start_min = parse_clock(start_time)
    return start_min, start_min + hours * 60


def display_end_time(end_min: float) -> str:
    minutes = int(round(end_min))
    return "%02d:%02d" % ((minutes // 60) % 24, minutes % 60)


def intervals_overlap(a_start: float, a_end: float, b_start: float, b_end: float) -> bool:
    # Touching endpoints do not conflict
    return a_start < b_end and b_start < a_end


def existing_window(booking: Dict[str, Any]) -> Optional[Tuple[int, float]]:
    """Interval of a stored booking, or None when it lacks a usable start"""
    if not booking or not booking.get("start_time"):
        return None
    try:
        start_min = parse_clock(booking["start_time"])
    except ValidationError:
        return None
    hours = booking.get("hours") or DEFAULT_BOOKING_HOURS
    return start_min, start_min + hours * 60


def conflicts_with(bookings: List[Dict[str, Any]], date: str, start_min: int, end_min: float) -> bool:
    """Whether any booking on the same date overlaps [start_min, end_min)"""
    for booking in bookings or []:
        if not booking or not booking.get("date"):
            continue
        # Dates are opaque tokens, compared exactly
        if str(booking["date"]) != str(date):
            continue
        window = existing_window(booking)
        if window and intervals_overlap(start_min, end_min, *window):
            return True
    return False


def new_booking(date: str, start_time: str, hours: float, email: str, created_by: str) -> Dict[str, Any]:
    _, end_min = booking_window(start_time, hours)
    return {
        "booking_id": generate_booking_id(),
        "date": date,
        "start_time": start_time,
        "end_time": display_end_time(end_min),
        "hours": hours,
        "created_by": created_by,
        "created_by_email": email,
        "created_at": get_current_timestamp(),
    }


def find_unavailable_seats(
    seats: List[Dict[str, Any]], seat_ids: List[int], date: str, start_time: str, hours: float
) -> List[Dict[str, Any]]:
    """Check every requested seat independently and collect the failures"""
    start_min, end_min = booking_window(start_time, hours)
    indexed = seats_by_id(seats)
    unavailable = []
    for seat_id in seat_ids:
        seat = indexed.get(seat_id)
        if seat is None:
            unavailable.append({"seat_id": seat_id, "reason": SEAT_NOT_FOUND})
        elif conflicts_with(seat.get("bookings"), date, start_min, end_min):
            unavailable.append({"seat_id": seat_id, "reason": SEAT_ALREADY_BOOKED})
    return unavailable


def book_seats(
    seats: List[Dict[str, Any]],
    seat_ids: List[int],
    date: str,
    start_time: str,
    hours: float,
    email: str,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Add one user booking to each requested seat, or none at all.

    Returns the updated copy of the seats and the created bookings. The input
    seats are never modified.
    """
    validate_date(date)
    if not seat_ids:
        raise ValidationError("seat_ids must contain at least one seat")
    if len(set(seat_ids)) != len(seat_ids):
        raise ValidationError("seat_ids must not contain duplicates")

    unavailable = find_unavailable_seats(seats, seat_ids, date, start_time, hours)
    if unavailable:
        raise ConflictError("Some seats are unavailable", details=unavailable)

    updated = copy.deepcopy(seats)
    indexed = seats_by_id(updated)
    created = []
    for seat_id in seat_ids:
        booking = new_booking(date, start_time, hours, email, USER)
        seat = indexed[seat_id]
        seat["bookings"] = (seat.get("bookings") or []) + [booking]
        created.append(dict(booking, seat_id=seat_id))
    return updated, created


def add_owner_booking(
    seats: List[Dict[str, Any]],
    seat_id: int,
    date: str,
    start_time: str,
    hours: float,
    email: str,
    occupied: Optional[List[Dict[str, Any]]] = None,
) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
    """Add an owner booking to one seat of the host request.

    ``occupied`` is the full list of bookings known for that seat, user
    bookings included; it defaults to the seat's own bookings.
    """
    validate_date(date)
    start_min, end_min = booking_window(start_time, hours)

    updated = copy.deepcopy(seats)
    seat = seats_by_id(updated).get(seat_id)
    if seat is None:
        raise NotFoundError(SEAT_NOT_FOUND)

    known = seat.get("bookings") if occupied is None else occupied
    if conflicts_with(known, date, start_min, end_min):
        raise ConflictError("Selected time overlaps with an existing booking")

    booking = new_booking(date, start_time, hours, email, OWNER)
    seat["bookings"] = (seat.get("bookings") or []) + [booking]
    return updated, booking


def _locate_booking(bookings: List[Dict[str, Any]], booking_ref: str) -> Optional[int]:
    for index, booking in enumerate(bookings):
        if booking and booking.get("booking_id") == booking_ref:
            return index
    # Positional references from clients that predate booking ids
    if str(booking_ref).isdigit():
        index = int(booking_ref)
        if index < len(bookings):
            return index
    return None


def remove_owner_booking(
    seats: List[Dict[str, Any]], seat_id: int, booking_ref: str
) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
    """Remove an owner booking by id, refusing to touch bookings made by users"""
    updated = copy.deepcopy(seats)
    seat = seats_by_id(updated).get(seat_id)
    if seat is None:
        raise NotFoundError(SEAT_NOT_FOUND)

    bookings = seat.get("bookings") or []
    index = _locate_booking(bookings, booking_ref)
    if index is None or not bookings[index]:
        raise NotFoundError("Booking not found")

    target = bookings[index]
    if target.get("created_by") == USER:
        raise AuthorizationError("You can't delete bookings made by users")

    seat["bookings"] = bookings[:index] + bookings[index + 1:]
    return updated, target


def check_owner_bookings(
    seats: List[Dict[str, Any]], user_bookings: Dict[int, List[Dict[str, Any]]]
) -> None:
    """Reject owner bookings that overlap each other or a user booking.

    ``user_bookings`` maps a seat id to the user bookings known for that seat.
    """
    for seat_id, seat in seats_by_id(seats).items():
        accepted = list(user_bookings.get(seat_id) or [])
        for booking in seat.get("bookings") or []:
            if not is_owner_booking(booking):
                continue
            validate_date(booking.get("date"))
            start_min, end_min = booking_window(booking.get("start_time"), booking.get("hours"))
            if conflicts_with(accepted, booking["date"], start_min, end_min):
                raise ConflictError(
                    "Selected time overlaps with an existing booking",
                    details=[{"seat_id": seat_id, "reason": SEAT_ALREADY_BOOKED}],
                )
            accepted.append(booking)

"""Seat array normalization and HostRequest/Venue seat merging.

A seat is a dict ``{id, label, price, bookings}`` whose ``id`` is its 1-based
position. The HostRequest owns labels, prices and owner bookings; the Venue
owns user bookings.
"""

import copy
from typing import Any, Dict, Iterable, List, Optional

USER = "user"
OWNER = "owner"


def empty_seat(seat_id: int) -> Dict[str, Any]:
    return {"id": seat_id, "label": "", "price": 0, "bookings": []}


def seats_by_id(seats: Optional[Iterable[Dict[str, Any]]]) -> Dict[int, Dict[str, Any]]:
    """Index seats by id, falling back to position for seats stored without one"""
    indexed = {}
    for position, seat in enumerate(seats or [], start=1):
        if not seat:
            continue
        seat_id = seat.get("id") or position
        indexed.setdefault(int(seat_id), seat)
    return indexed


def desired_seat_count(capacity: Optional[int], *seat_arrays) -> int:
    """Length a seat array must have to cover capacity and every known seat"""
    count = int(capacity or 0)
    for seats in seat_arrays:
        seats = seats or []
        count = max(count, len(seats), max(seats_by_id(seats) or [0]))
    return count


def normalize_seats(seats: Optional[List[Dict[str, Any]]], length: int) -> List[Dict[str, Any]]:
    """Return exactly ``length`` seats with ids 1..length, filling the gaps.

    Existing seats keep their content at the same id. Normalizing an already
    normalized array to the same length gives an equal array.
    """
    indexed = seats_by_id(seats)
    normalized = []
    for seat_id in range(1, length + 1):
        seat = indexed.get(seat_id)
        if seat is None:
            normalized.append(empty_seat(seat_id))
            continue
        seat = copy.deepcopy(seat)
        seat["id"] = seat_id
        seat.setdefault("label", "")
        seat.setdefault("price", 0)
        seat["bookings"] = seat.get("bookings") or []
        normalized.append(seat)
    return normalized


def is_user_booking(booking: Dict[str, Any]) -> bool:
    return bool(booking) and booking.get("created_by") == USER


def is_owner_booking(booking: Dict[str, Any]) -> bool:
    # Bookings written before origin tagging belong to the owner
    return bool(booking) and booking.get("created_by") in (None, OWNER)


def _first_set(*values):
    for value in values:
        if value is not None:
            return value
    return None


def merge_seat(
    seat_id: int,
    host_seat: Optional[Dict[str, Any]],
    venue_seat: Optional[Dict[str, Any]],
    default_price: float = 0,
) -> Dict[str, Any]:
    host_seat = host_seat or {}
    venue_seat = venue_seat or {}

    user_bookings = [b for b in venue_seat.get("bookings") or [] if is_user_booking(b)]
    owner_bookings = [b for b in host_seat.get("bookings") or [] if is_owner_booking(b)]

    return {
        "id": seat_id,
        "label": _first_set(host_seat.get("label"), venue_seat.get("label"), ""),
        "price": _first_set(host_seat.get("price"), venue_seat.get("price"), default_price, 0),
        "bookings": copy.deepcopy(user_bookings + owner_bookings),
    }


def merge_seat_arrays(
    host_seats: Optional[List[Dict[str, Any]]],
    venue_seats: Optional[List[Dict[str, Any]]],
    capacity: Optional[int] = 0,
    default_price: float = 0,
) -> List[Dict[str, Any]]:
    """Reconcile the seats of a HostRequest with those of its Venue.

    Labels and prices come from the host side, falling back to the venue.
    Each merged seat carries the venue's user bookings followed by the host's
    owner bookings, so neither side can erase the other's bookings.
    """
    length = desired_seat_count(capacity, host_seats, venue_seats)
    host_index = seats_by_id(host_seats)
    venue_index = seats_by_id(venue_seats)
    return [
        merge_seat(seat_id, host_index.get(seat_id), venue_index.get(seat_id), default_price)
        for seat_id in range(1, length + 1)
    ]

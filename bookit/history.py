from typing import Any, Dict, List, Optional

from bookit.seat_merge import USER


def booked_at(booking: Dict[str, Any]) -> str:
    """Creation time of a booking, or its slot start for older records"""
    if booking.get("created_at"):
        return booking["created_at"]
    start = (booking.get("start_time") or "00:00").zfill(5)
    return f"{booking.get('date', '')}T{start}:00+00:00"


def collect_venue_bookings(
    venues: List[Dict[str, Any]], email: Optional[str] = None, user_only: bool = False
) -> List[Dict[str, Any]]:
    """Flatten the bookings held on venue seats, most recent first"""
    entries = []
    for venue in venues:
        for seat in venue.get("seats") or []:
            seat_price = seat.get("price") or venue.get("price_per_hour") or 0
            for booking in seat.get("bookings") or []:
                if not booking or not booking.get("created_by_email"):
                    continue
                if email is not None and booking["created_by_email"] != email:
                    continue
                if user_only and booking.get("created_by") != USER:
                    continue

                hours = booking.get("hours") or 1
                entries.append({
                    "type": "venue",
                    "venue_id": venue["venue_id"],
                    "venue_name": venue.get("venue_name", ""),
                    "seat_id": seat["id"],
                    "seat_label": seat.get("label") or "",
                    "booking_id": booking.get("booking_id"),
                    "date": booking.get("date", ""),
                    "start_time": booking.get("start_time", ""),
                    "end_time": booking.get("end_time"),
                    "hours": hours,
                    "price_per_hour": seat_price,
                    "total_price": seat_price * hours,
                    "address": venue.get("address") or "",
                    "city": venue.get("city") or "",
                    "user_email": booking["created_by_email"],
                    "booking_type": booking.get("created_by") or USER,
                    "booked_at": booked_at(booking),
                })

    entries.sort(key=lambda entry: entry["booked_at"], reverse=True)
    return entries


def summarize(entries: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "total_bookings": len(entries),
        "total_revenue": sum(entry["total_price"] for entry in entries),
        "venue_bookings": sum(1 for entry in entries if entry["type"] == "venue"),
        "unique_users": len({entry["user_email"] for entry in entries}),
    }

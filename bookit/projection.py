"""Projection of approved HostRequests into public Venue documents."""

from typing import Any, Dict, Optional, Tuple

from loguru import logger

from bookit.documents import (
    VENUE_SK,
    delete_venues_for_host_request,
    find_venues_for_host_request,
    save_document,
)
from bookit.sync import merged_seats_for, reconcile
from bookit.utils import generate_venue_id

APPROVED = "approved"
STATUSES = ("pending", "approved", "rejected")

PROJECTED_FIELDS = (
    "venue_name",
    "business_type",
    "contact_person",
    "email",
    "phone",
    "address",
    "city",
    "map_link",
    "website",
    "description",
    "status",
    "submitted_by_email",
    "capacity",
    "amenities",
    "price_per_hour",
    "images",
    "seats",
    "availability_slots",
)

# Fields refreshed on read when the host request holds a non-empty value
PULLED_FIELDS = (
    "description",
    "website",
    "address",
    "city",
    "map_link",
    "business_type",
    "amenities",
)


def build_venue(host_request: Dict[str, Any], existing: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Venue document for a host request, reusing the existing venue's identity"""
    venue = dict(existing or {})
    if not venue:
        venue_id = generate_venue_id()
        venue.update({"pk": venue_id, "sk": VENUE_SK, "venue_id": venue_id, "version": 0})
    for field in PROJECTED_FIELDS:
        venue[field] = host_request.get(field)
    venue["host_request_id"] = host_request["host_request_id"]
    venue["map_link"] = host_request.get("map_link") or ""
    return venue


def publish(db, host_request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Upsert the venue of an approved host request and reconcile its seats"""
    venues = find_venues_for_host_request(db, host_request["host_request_id"])
    existing = venues[0] if venues else None

    venue = build_venue(host_request, existing)
    if existing:
        # Keep the user bookings the stale venue copy already holds
        venue["seats"] = existing.get("seats") or []
    venue = save_document(db, venue)
    logger.info(f"Published venue {venue['venue_id']} for host request {host_request['host_request_id']}")

    merged = reconcile(db, host_request, venue)
    venue["seats"] = merged
    return venue


def apply_status_change(db, host_request: Dict[str, Any]) -> None:
    """Create or remove the public venue after an admin status change.

    Failures are logged and never undo the committed status change.
    """
    try:
        if host_request.get("status") == APPROVED:
            publish(db, host_request)
        else:
            delete_venues_for_host_request(db, host_request["host_request_id"])
    except Exception as e:
        logger.warning(f"Failed to project host request {host_request['host_request_id']}: {e}")


def cascade_delete(db, host_request_id: str) -> int:
    try:
        return delete_venues_for_host_request(db, host_request_id)
    except Exception as e:
        logger.warning(f"Cascade delete failed for host request {host_request_id}: {e}")
        return 0


def pull_forward(venue: Dict[str, Any], host_request: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
    """Refresh a venue with the more current values of its host request.

    Returns the refreshed copy and whether anything changed.
    """
    refreshed = dict(venue)

    if (host_request.get("capacity") or 0) > 0:
        refreshed["capacity"] = host_request["capacity"]
    if host_request.get("price_per_hour") is not None:
        refreshed["price_per_hour"] = host_request["price_per_hour"]
    if host_request.get("images"):
        refreshed["images"] = host_request["images"]
    for field in PULLED_FIELDS:
        if host_request.get(field):
            refreshed[field] = host_request[field]

    if host_request.get("seats"):
        refreshed["seats"] = merged_seats_for(host_request, venue)

    refreshed["capacity"] = refreshed.get("capacity") or 0
    refreshed["images"] = refreshed.get("images") or []
    refreshed["seats"] = refreshed.get("seats") or []

    changed = any(refreshed.get(k) != venue.get(k) for k in refreshed)
    return refreshed, changed

"""Best-effort reconciliation between a HostRequest and its public Venue.

The request's own write is always committed before anything here runs, so a
failure only leaves the two documents temporarily out of step until the next
write on either side.
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from bookit.documents import find_venues_for_host_request, get_host_request, save_documents
from bookit.seat_merge import merge_seat_arrays


def merged_seats_for(host_request: Dict[str, Any], venue: Dict[str, Any]) -> List[Dict[str, Any]]:
    return merge_seat_arrays(
        host_request.get("seats"),
        venue.get("seats"),
        host_request.get("capacity") or 0,
        host_request.get("price_per_hour") or 0,
    )


def reconcile(
    db, host_request: Dict[str, Any], venue: Dict[str, Any], extra_venue_fields: Optional[Dict[str, Any]] = None
) -> Optional[List[Dict[str, Any]]]:
    """Write the merged seats to both documents in one transaction"""
    merged = merged_seats_for(host_request, venue)
    host_doc = dict(host_request, seats=merged)
    venue_doc = dict(venue, seats=merged, **(extra_venue_fields or {}))
    save_documents(db, [host_doc, venue_doc])
    return merged


def sync_venue_from_host_request(db, host_request: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
    """Push a host side write to the linked venue, if the host request is published"""
    try:
        venues = find_venues_for_host_request(db, host_request["host_request_id"])
        if not venues:
            return None
        venue = venues[0]
        return reconcile(
            db,
            host_request,
            venue,
            {"map_link": host_request.get("map_link") or venue.get("map_link") or ""},
        )
    except Exception as e:
        logger.warning(f"Failed to sync venue from host request {host_request.get('host_request_id')}: {e}")
        return None


def sync_host_request_from_venue(db, venue: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
    """Mirror user bookings made on a venue into its host request"""
    host_request_id = venue.get("host_request_id")
    if not host_request_id:
        return None
    try:
        host_request = get_host_request(db, host_request_id)
        if not host_request:
            return None
        return reconcile(db, host_request, venue)
    except Exception as e:
        logger.warning(f"Failed to sync host request seats from venue {venue.get('venue_id')}: {e}")
        return None

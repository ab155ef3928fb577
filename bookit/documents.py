"""Loading and saving HostRequest and Venue documents.

Both kinds live in the same table: ``pk`` holds the document id and ``sk`` the
kind. Every save is conditional on the version that was read, so a concurrent
writer makes the second save fail instead of silently replacing the seats.
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from bookit.exceptions import ConflictError, NotFoundError, StorageError
from bookit.utils import get_current_timestamp

HOST_REQUEST_SK = "HOST_REQUEST"
VENUE_SK = "VENUE"


def _check(result: Dict[str, Any], action: str) -> Dict[str, Any]:
    if result["status"] == "error":
        raise StorageError(f"Failed to {action}: {result['error']}")
    return result


def _stamped(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of the document with its next version and update time"""
    stored = dict(doc)
    stored["version"] = int(doc.get("version") or 0) + 1
    stored["updated_at"] = get_current_timestamp()
    stored.setdefault("created_at", stored["updated_at"])
    return stored


def get_host_request(db, host_request_id: str) -> Optional[Dict[str, Any]]:
    result = _check(db.get_item(host_request_id, HOST_REQUEST_SK), "fetch host request")
    return result["item"]


def get_owned_host_request(db, host_request_id: str, email: str) -> Dict[str, Any]:
    """Fetch a host request that belongs to the caller"""
    doc = get_host_request(db, host_request_id)
    if not doc or doc.get("submitted_by_email") != email:
        raise NotFoundError("Venue not found or unauthorized")
    return doc


def get_venue(db, venue_id: str) -> Optional[Dict[str, Any]]:
    result = _check(db.get_item(venue_id, VENUE_SK), "fetch venue")
    return result["item"]


def list_host_requests(db, **filters) -> List[Dict[str, Any]]:
    result = _check(db.scan_items(HOST_REQUEST_SK, filters), "list host requests")
    return sorted(result["items"], key=lambda d: d.get("created_at", ""), reverse=True)


def list_venues(db, **filters) -> List[Dict[str, Any]]:
    result = _check(db.scan_items(VENUE_SK, filters), "list venues")
    return sorted(result["items"], key=lambda d: d.get("created_at", ""), reverse=True)


def find_venues_for_host_request(db, host_request_id: str) -> List[Dict[str, Any]]:
    return list_venues(db, host_request_id=host_request_id)


def save_document(db, doc: Dict[str, Any]) -> Dict[str, Any]:
    """Write one document, failing with 409 if it changed since it was read"""
    expected = int(doc.get("version") or 0)
    stored = _stamped(doc)
    result = db.put_item(stored, expected_version=expected)
    if result["status"] == "conflict":
        raise ConflictError("The record was modified concurrently, please retry")
    _check(result, f"save {doc.get('sk', 'document').lower()}")
    return stored


def save_documents(db, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Write several documents in one transaction, each guarded by its version"""
    stored = [_stamped(doc) for doc in docs]
    puts = [(new, int(old.get("version") or 0)) for new, old in zip(stored, docs)]
    result = db.transact_put_items(puts)
    if result["status"] == "conflict":
        raise ConflictError("The records were modified concurrently, please retry")
    _check(result, "save documents")
    return stored


def delete_document(db, doc: Dict[str, Any]) -> None:
    _check(db.delete_item(doc["pk"], doc["sk"]), f"delete {doc['sk'].lower()}")


def delete_venues_for_host_request(db, host_request_id: str) -> int:
    """Delete every venue linked to a host request, there may be more than one"""
    venues = find_venues_for_host_request(db, host_request_id)
    for venue in venues:
        delete_document(db, venue)
    logger.info(f"Deleted {len(venues)} venue(s) linked to host request {host_request_id}")
    return len(venues)

from typing import List

from fastapi import APIRouter, Depends, Path
from loguru import logger

from bookit.auth import CurrentUser, get_current_admin
from bookit.database import get_db_client
from bookit.documents import delete_document, get_host_request, list_host_requests, list_venues, save_document
from bookit.exceptions import NotFoundError
from bookit.history import collect_venue_bookings, summarize
from bookit.models.host_request import HostRequestResponse, StatusUpdate
from bookit.models.venue import AllBookingsResponse
from bookit.projection import apply_status_change, cascade_delete

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/host/requests", response_model=List[HostRequestResponse])
async def get_all_host_requests(
    admin: CurrentUser = Depends(get_current_admin),
    db=Depends(get_db_client),
):
    """List every host request, newest first"""
    return list_host_requests(db)


@router.put("/host/requests/{host_request_id}/status", response_model=HostRequestResponse)
async def update_host_request_status(
    status_update: StatusUpdate,
    host_request_id: str = Path(..., description="The host request ID"),
    admin: CurrentUser = Depends(get_current_admin),
    db=Depends(get_db_client),
):
    """Moderate a host request.

    Approving publishes (or refreshes) its venue; any other status removes the
    venue entirely.
    """
    host_request = get_host_request(db, host_request_id)
    if not host_request:
        raise NotFoundError("Request not found")

    previous = host_request.get("status")
    host_request["status"] = status_update.status
    saved = save_document(db, host_request)
    logger.info(f"{admin.email} moved host request {host_request_id} from {previous} to {saved['status']}")

    apply_status_change(db, saved)

    return saved


@router.delete("/host/requests/{host_request_id}")
async def delete_host_request(
    host_request_id: str = Path(..., description="The host request ID"),
    admin: CurrentUser = Depends(get_current_admin),
    db=Depends(get_db_client),
):
    host_request = get_host_request(db, host_request_id)
    if not host_request:
        raise NotFoundError("Venue not found")

    delete_document(db, host_request)
    deleted_venues = cascade_delete(db, host_request_id)

    return {"message": "Venue deleted", "deleted_venues": deleted_venues}


@router.get("/bookings/all", response_model=AllBookingsResponse)
async def get_all_bookings(
    admin: CurrentUser = Depends(get_current_admin),
    db=Depends(get_db_client),
):
    """All venue bookings across the platform with summary figures"""
    entries = collect_venue_bookings(list_venues(db))
    return {"bookings": entries, "summary": summarize(entries)}

"""
Administrative endpoints for device approval.
"""

from fastapi import APIRouter, Depends

from savings_ledger.api.deps import get_device_service, require_admin
from savings_ledger.api.errors import to_http
from savings_ledger.errors import LedgerError
from savings_ledger.schemas.device import DeviceResponse, DeviceStatusUpdate
from savings_ledger.services.device_service import DeviceService
from savings_ledger.services.token_service import SessionClaims

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users/{user_id}/devices", response_model=list[DeviceResponse])
def list_user_devices(
    user_id: int,
    _: SessionClaims = Depends(require_admin),
    service: DeviceService = Depends(get_device_service),
):
    """List a user's devices."""
    try:
        return service.list_for_user(user_id)
    except LedgerError as e:
        raise to_http(e)


@router.patch("/devices/{device_id}/status", response_model=DeviceResponse)
def change_device_status(
    device_id: int,
    request: DeviceStatusUpdate,
    _: SessionClaims = Depends(require_admin),
    service: DeviceService = Depends(get_device_service),
):
    """
    Approve or reject a device.

    Only PENDING devices can change status.
    """
    try:
        return service.change_status(device_id, request.new_status)
    except LedgerError as e:
        raise to_http(e)

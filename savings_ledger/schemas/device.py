"""
Pydantic schemas for administrative device management.
"""

from datetime import datetime

from pydantic import BaseModel

from savings_ledger.models.enums import DeviceStatus


class DeviceStatusUpdate(BaseModel):
    """Request to approve or reject a device."""
    new_status: DeviceStatus


class DeviceResponse(BaseModel):
    id: int
    user_id: int
    device_identifier: str
    status: DeviceStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

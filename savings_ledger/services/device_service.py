"""
Device service — administrative device management.

Approving or rejecting a device is the only way a device
changes status. The state machine lives on the Device model;
this service enforces it.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from savings_ledger.errors import InvalidTransition, NotFound
from savings_ledger.models.device import Device
from savings_ledger.models.enums import DeviceStatus
from savings_ledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


class DeviceService:

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def change_status(self, device_id: int, new_status: DeviceStatus) -> Device:
        """
        Move a device to a new status.

        Only PENDING devices can change, to VERIFIED or REJECTED.
        """
        with unit_of_work(self.session_factory) as db:
            device = db.get(Device, device_id)
            if device is None:
                raise NotFound(f"Device {device_id} not found")

            if not device.can_transition_to(new_status):
                raise InvalidTransition(
                    f"Cannot transition from {device.status.value} "
                    f"to {new_status.value}"
                )

            device.status = new_status
            db.flush()

        logger.info(
            "Device %s of user %s set to %s",
            device.id, device.user_id, new_status.value,
        )
        return device

    def list_for_user(self, user_id: int) -> list[Device]:
        """Get all devices registered by a user."""
        with unit_of_work(self.session_factory) as db:
            devices = db.execute(
                select(Device)
                .where(Device.user_id == user_id)
                .order_by(Device.id)
            ).scalars().all()
        return list(devices)

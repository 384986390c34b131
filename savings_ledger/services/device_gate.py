"""
Device gate — decides whether a (user, device) pair may transact.

A missing device and an unverified device are treated the same
way: both are simply "not verified". The gate never creates
device rows.
"""

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from savings_ledger.errors import DeviceNotVerified
from savings_ledger.models.device import Device
from savings_ledger.models.enums import DeviceStatus
from savings_ledger.services.unit_of_work import unit_of_work


class DeviceGate:

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def is_verified(self, user_id: int, device_identifier: str) -> bool:
        with unit_of_work(self.session_factory) as db:
            device_id = db.execute(
                select(Device.id).where(
                    Device.user_id == user_id,
                    Device.device_identifier == device_identifier,
                    Device.status == DeviceStatus.VERIFIED,
                )
            ).scalar_one_or_none()
        return device_id is not None

    def require_verified(self, user_id: int, device_identifier: str) -> None:
        """Raise DeviceNotVerified unless the device is VERIFIED."""
        if not self.is_verified(user_id, device_identifier):
            raise DeviceNotVerified()

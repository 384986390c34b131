"""
Device model.

A device identifier a user has presented at registration.
Money can only move from a device an administrator has
VERIFIED. Status changes follow a small state machine:
a PENDING device is either approved or rejected, and both
outcomes are final.
"""

from datetime import datetime

from sqlalchemy import (
    String, DateTime, ForeignKey, UniqueConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from savings_ledger.models.base import Base
from savings_ledger.models.enums import DeviceStatus


# Valid state transitions: the source of truth for the state machine
VALID_TRANSITIONS: dict[DeviceStatus, set[DeviceStatus]] = {
    DeviceStatus.PENDING: {DeviceStatus.VERIFIED, DeviceStatus.REJECTED},
    DeviceStatus.VERIFIED: set(),
    DeviceStatus.REJECTED: set(),
}


class Device(Base):
    __tablename__ = "devices"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "device_identifier", name="uq_devices_user_device"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    device_identifier: Mapped[str] = mapped_column(
        String(255), nullable=False
    )
    status: Mapped[DeviceStatus] = mapped_column(
        SAEnum(
            DeviceStatus,
            name="device_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=DeviceStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user: Mapped["User"] = relationship(back_populates="devices")

    def can_transition_to(self, new_status: DeviceStatus) -> bool:
        """Check if a state transition is valid."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __repr__(self) -> str:
        return f"<Device {self.device_identifier} ({self.status.value})>"

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, ForeignKey
from episure.core.base import Base, TimestampedMixin

# Every configured case carries exactly one row per type.
NOTIFICATION_TYPES: tuple[str, ...] = (
    "medication_reminder",
    "appointment_reminder",
    "battery_low_alert",
    "connection_status_alert",
    "case_status_update",
    "emergency_alert",
    "system_maintenance",
)

class NotificationPreference(Base, TimestampedMixin):
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id"), index=True)
    case_id: Mapped[int] = mapped_column(ForeignKey("case.id"), index=True)
    type: Mapped[str] = mapped_column(String(100))
    delivery_method: Mapped[str | None] = mapped_column(String(100), nullable=True)  # comma-joined, e.g. "email,sms"
    enabled: Mapped[bool] = mapped_column(Boolean, default=True)

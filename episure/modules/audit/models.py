from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, TIMESTAMP, JSON
from episure.core.base import Base, TimestampedMixin, utcnow

class AuditEvent(Base, TimestampedMixin):
    # who
    actor_user_id: Mapped[int | None] = mapped_column(nullable=True)
    # What happened
    action: Mapped[str] = mapped_column(String(24))  # CREATE | UPDATE | INVITE | REGISTER
    resource_type: Mapped[str] = mapped_column(String(48))  # CASE | PATIENT | MEDICATION | ...
    resource_id: Mapped[str] = mapped_column(String(255))     # case code, numeric id as text, or "-"
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    success: Mapped[bool] = mapped_column(default=True)
    client_ip: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(256), nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), default=utcnow)

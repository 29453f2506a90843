from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, ForeignKey, TIMESTAMP
from episure.core.base import Base, TimestampedMixin
from episure.modules.cases.workflow import CaseStep

class Case(Base, TimestampedMixin):
    case_id: Mapped[str] = mapped_column(String(255), unique=True)  # client-provided case code
    patient_id: Mapped[int | None] = mapped_column(ForeignKey("patient.id"), nullable=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id"), index=True)  # owner, never reassigned
    case_name: Mapped[str] = mapped_column(String(255))
    current_step: Mapped[str | None] = mapped_column(String(50), nullable=True, default=CaseStep.CREATED.value)
    battery_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    last_seen: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    connection_status: Mapped[str | None] = mapped_column(String(50), nullable=True, default="disconnected")

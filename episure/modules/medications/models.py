from datetime import date
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Date, ForeignKey, CheckConstraint
from episure.core.base import Base, TimestampedMixin

class Medication(Base, TimestampedMixin):
    """One epinephrine spray slot of a case; a case has slots 1 and 2."""
    __table_args__ = (
        CheckConstraint("spray_number IN (1, 2)", name="ck_medication_spray_number"),
    )

    case_id: Mapped[int] = mapped_column(ForeignKey("case.id"), index=True)
    spray_number: Mapped[int] = mapped_column()
    status: Mapped[str] = mapped_column(String(50), default="pending")
    expiration_date_spray_1: Mapped[date] = mapped_column(Date)
    lot_number_spray_1: Mapped[str | None] = mapped_column(String(50), nullable=True)
    expiration_date_spray_2: Mapped[date] = mapped_column(Date)
    lot_number_spray_2: Mapped[str | None] = mapped_column(String(50), nullable=True)
    dosage_details: Mapped[str | None] = mapped_column(String(500), nullable=True)

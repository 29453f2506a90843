from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, ForeignKey
from episure.core.base import Base, TimestampedMixin

class EmergencyContact(Base, TimestampedMixin):
    case_id: Mapped[int] = mapped_column(ForeignKey("case.id"), index=True)
    first_name: Mapped[str] = mapped_column(String(50))
    last_name: Mapped[str] = mapped_column(String(50))
    email: Mapped[str] = mapped_column(String(255), index=True)
    phone_number: Mapped[str] = mapped_column(String(20))
    invite_sent: Mapped[bool] = mapped_column(Boolean, default=False)

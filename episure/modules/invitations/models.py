from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, ForeignKey
from episure.core.base import Base, TimestampedMixin

class InvitedUser(Base, TimestampedMixin):
    case_id: Mapped[int] = mapped_column(ForeignKey("case.id"), index=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("user.id"), nullable=True)  # set once the invitee registers
    email: Mapped[str] = mapped_column(String(255))

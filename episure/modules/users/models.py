from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean
from episure.core.base import Base, TimestampedMixin

class User(Base, TimestampedMixin):
    entra_oid: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)  # external-auth subject
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    phone_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    account_status: Mapped[str] = mapped_column(String(20), default="incomplete")  # incomplete | complete
    first_login_completed: Mapped[bool] = mapped_column(Boolean, default=False)

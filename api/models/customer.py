"""Customer ORM model (officers are customers with role OFFICER)."""

from datetime import datetime
from sqlalchemy import String, Text, DateTime, Enum as PgEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from db.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    unique_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(128), nullable=False)
    country_code: Mapped[str] = mapped_column(String(5), nullable=False)
    mobile_number: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(
        PgEnum("CUSTOMER", "OFFICER", name="user_role"),
        default="CUSTOMER",
        nullable=False,
    )
    get_updates_via: Mapped[str | None] = mapped_column(String(100))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    bookings = relationship(
        "Booking", back_populates="customer", foreign_keys="Booking.customer_id", lazy="raise",
    )

    @property
    def is_officer(self) -> bool:
        return self.role == "OFFICER"

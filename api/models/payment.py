"""Payment ORM model, one simulated card payment per booking."""

from datetime import datetime
from sqlalchemy import String, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from db.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    booking_id: Mapped[int] = mapped_column(ForeignKey("bookings.id"), unique=True, nullable=False, index=True)
    payment_id: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    transaction_id: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    invoice_number: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(10, 2), nullable=False)
    cardholder_name: Mapped[str] = mapped_column(String(255), nullable=False)
    masked_card: Mapped[str] = mapped_column(String(25), nullable=False)
    payment_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    # Relationships
    booking = relationship("Booking", back_populates="payment")

"""Booking and BookingEvent ORM models for the parcel lifecycle."""

from datetime import datetime
from sqlalchemy import (
    String, Integer, Numeric, Boolean, DateTime, ForeignKey, Text,
    Enum as PgEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from db.database import Base

PARCEL_STATUSES = ("NEW", "BOOKED", "IN_TRANSIT", "DELIVERED", "CANCELLED")


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    booking_id: Mapped[str] = mapped_column(String(30), unique=True, nullable=False, index=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False, index=True)
    created_by_id: Mapped[int | None] = mapped_column(ForeignKey("customers.id"))

    # Receiver
    receiver_name: Mapped[str] = mapped_column(String(255), nullable=False)
    receiver_address: Mapped[str] = mapped_column(Text, nullable=False)
    receiver_pin: Mapped[str] = mapped_column(String(10), nullable=False)
    receiver_mobile: Mapped[str] = mapped_column(String(20), nullable=False)

    # Parcel
    parcel_weight_in_gram: Mapped[int] = mapped_column(Integer, nullable=False)
    parcel_contents_description: Mapped[str] = mapped_column(Text, nullable=False)
    parcel_delivery_type: Mapped[str] = mapped_column(
        PgEnum("STANDARD", "EXPRESS", "SAME_DAY", name="delivery_type"),
        nullable=False,
    )
    parcel_packing_preference: Mapped[str] = mapped_column(
        PgEnum("BASIC", "PREMIUM", name="packing_preference"),
        nullable=False,
    )
    parcel_pickup_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    parcel_dropoff_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Pricing (computed server-side)
    parcel_service_cost: Mapped[float] = mapped_column(Numeric(10, 2), nullable=False)
    is_officer_booking: Mapped[bool] = mapped_column(Boolean, default=False)
    parcel_payment_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    parcel_status: Mapped[str] = mapped_column(
        PgEnum(*PARCEL_STATUSES, name="parcel_status"),
        default="NEW",
        nullable=False,
    )

    # Optimistic lock counter, bumped on every UPDATE
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    __mapper_args__ = {"version_id_col": version_id}

    # Relationships
    customer = relationship("Customer", back_populates="bookings", foreign_keys=[customer_id], lazy="selectin")
    created_by = relationship("Customer", foreign_keys=[created_by_id], lazy="selectin")
    payment = relationship("Payment", back_populates="booking", uselist=False, lazy="selectin")
    feedback = relationship("Feedback", back_populates="booking", uselist=False, lazy="selectin")
    events = relationship(
        "BookingEvent", back_populates="booking", lazy="selectin",
        order_by="BookingEvent.id",
    )


class BookingEvent(Base):
    __tablename__ = "booking_events"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    booking_id: Mapped[int] = mapped_column(ForeignKey("bookings.id"), nullable=False, index=True)
    from_status: Mapped[str | None] = mapped_column(PgEnum(*PARCEL_STATUSES, name="parcel_status"))
    to_status: Mapped[str] = mapped_column(PgEnum(*PARCEL_STATUSES, name="parcel_status"), nullable=False)
    actor_type: Mapped[str] = mapped_column(String(20), nullable=False)  # CUSTOMER, OFFICER, SYSTEM
    actor_id: Mapped[int | None] = mapped_column(Integer)
    note: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    # Relationships
    booking = relationship("Booking", back_populates="events")

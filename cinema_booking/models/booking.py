from datetime import datetime
from enum import Enum
from sqlalchemy import DateTime, Index, Integer, String, Enum as SAEnum, text
from sqlalchemy.orm import Mapped, mapped_column
from cinema_booking.db.base import Base
from cinema_booking.models import TimestampMixin, utcnow


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


CONFIRMED_ONLY = text("status = 'confirmed'")


class Booking(Base, TimestampMixin):
    # cancelled rows stay as history, only confirmed ones hold the seat
    __table_args__ = (
        Index(
            "unique_confirmed_seat_show",
            "seat_number", "show_time", "movie_name",
            unique=True,
            postgresql_where=CONFIRMED_ONLY,
            sqlite_where=CONFIRMED_ONLY,
        ),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    movie_name: Mapped[str] = mapped_column(String(100), nullable=False)
    show_time: Mapped[str] = mapped_column(String(20), nullable=False)
    seat_number: Mapped[str] = mapped_column(String(10), nullable=False)
    booking_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow)
    status: Mapped[BookingStatus] = mapped_column(SAEnum(
        BookingStatus, name="booking_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=BookingStatus.CONFIRMED)

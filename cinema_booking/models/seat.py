from decimal import Decimal
from enum import Enum
from sqlalchemy import Boolean, Integer, Numeric, String, Enum as SAEnum, UniqueConstraint
from sqlalchemy.orm import mapped_column, Mapped
from cinema_booking.db.base import Base
from cinema_booking.models import TimestampMixin


class SeatType(str, Enum):
    REGULAR = "regular"
    PREMIUM = "premium"


class Seat(Base, TimestampMixin):
    __table_args__ = (
        UniqueConstraint("seat_number", "show_time", "movie_name", name="unique_seat"),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    seat_number: Mapped[str] = mapped_column(String(10), nullable=False)
    movie_name: Mapped[str] = mapped_column(String(100), nullable=False)
    show_time: Mapped[str] = mapped_column(String(20), nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    seat_type: Mapped[SeatType] = mapped_column(SAEnum(
        SeatType, name="seat_type_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=SeatType.REGULAR)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("150.00"))

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict

from cinema_booking.models.seat import SeatType


class SeatBase(BaseModel):
    seat_number: str
    seat_type: SeatType
    price: Decimal


class SeatResponse(SeatBase):
    is_available: bool

    model_config = ConfigDict(from_attributes=True)


class SeatAvailability(BaseModel):
    exists: bool
    is_available: bool = False
    price: Optional[Decimal] = None
    seat_type: Optional[SeatType] = None

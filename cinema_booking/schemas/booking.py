from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_validator

from cinema_booking.core import validators
from cinema_booking.models.booking import BookingStatus
from cinema_booking.models.seat import SeatType


class ContactInfo(BaseModel):
    """Customer contact fields as the booking form sends them."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    user_name: str = Field(alias="userName")
    email: str
    phone: str

    @field_validator("user_name", "email", "phone")
    @classmethod
    def required(cls, value: str) -> str:
        if validators.is_blank(value):
            raise ValueError(validators.REQUIRED_MESSAGE)
        return value

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        if not validators.is_valid_email(value):
            raise ValueError(validators.EMAIL_MESSAGE)
        return value

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, value: str) -> str:
        if not validators.is_valid_phone(value):
            raise ValueError(validators.PHONE_MESSAGE)
        return value


class BookingCreate(ContactInfo):
    movie_name: str = Field(alias="movieName", min_length=1)
    show_time: str = Field(alias="showTime", min_length=1)
    seat_number: str = Field(alias="seatNumber", min_length=1)


class BookingUpdate(ContactInfo):
    pass


class BookingResponse(BaseModel):
    id: int
    user_name: str
    email: str
    phone: str
    movie_name: str
    show_time: str
    seat_number: str
    booking_date: datetime
    status: BookingStatus

    model_config = ConfigDict(from_attributes=True)


class BookingDetailResponse(BookingResponse):
    price: Decimal
    seat_type: SeatType


class BookingCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Booking confirmed"
    bookingId: int


class BookingActionResponse(BaseModel):
    success: bool = True
    message: str

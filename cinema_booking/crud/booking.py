import logging
from typing import List

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select, update

from cinema_booking.core.exceptions import (
    BookingError,
    BookingNotCancellableError,
    BookingNotFoundError,
    SeatNotFoundError,
    SeatUnavailableError,
    TransactionFailedError,
)
from cinema_booking.core.validators import validate_contact_info
from cinema_booking.crud.seat import CRUDSeat, crud_seat
from cinema_booking.models.booking import Booking, BookingStatus
from cinema_booking.models.seat import Seat
from cinema_booking.models import utcnow
from cinema_booking.schemas.booking import BookingCreate, BookingDetailResponse, BookingResponse


BOOKING_WITH_SEAT = (
    select(Booking, Seat.price, Seat.seat_type)
    .join(Seat, and_(
        Booking.seat_number == Seat.seat_number,
        Booking.movie_name == Seat.movie_name,
        Booking.show_time == Seat.show_time,
    ))
)


def _detail(row) -> BookingDetailResponse:
    booking, price, seat_type = row
    return BookingDetailResponse(
        **BookingResponse.model_validate(booking).model_dump(),
        price=price,
        seat_type=seat_type,
    )


class CRUDBooking:
    """
    Booking transaction manager.

    reserve, cancel and delete each run as one transaction on the given
    session: the row the decision depends on is locked, the booking and the
    seat flag are written together, and any failure rolls both back.
    The session must not already be inside a transaction.
    """

    def __init__(self, ledger: CRUDSeat):
        self.ledger = ledger

    # .1 lock the seat row and check it exists and is available.
    # .2 insert the booking as confirmed.
    # .3 flip the seat to unavailable.
    # .4 commit, or roll everything back on failure.
    async def reserve(self, db: AsyncSession, data: BookingCreate) -> Booking:
        try:
            async with db.begin():
                seat = await self.ledger.get_availability(
                    db, data.movie_name, data.show_time, data.seat_number, for_update=True)
                if not seat.exists:
                    raise SeatNotFoundError()
                if not seat.is_available:
                    raise SeatUnavailableError()

                booking = Booking(
                    user_name=data.user_name,
                    email=data.email,
                    phone=data.phone,
                    movie_name=data.movie_name,
                    show_time=data.show_time,
                    seat_number=data.seat_number,
                    booking_date=utcnow(),
                    status=BookingStatus.CONFIRMED,
                )
                db.add(booking)
                await db.flush()
                await self.ledger.set_availability(
                    db, data.movie_name, data.show_time, data.seat_number, False)
        except BookingError:
            raise
        except IntegrityError as e:
            # unique_confirmed_seat_show: another confirmed booking holds the seat
            logging.warning(f"confirmed booking already exists for {data.movie_name}/{data.show_time}/{data.seat_number}: {e}")
            raise SeatUnavailableError()
        except SQLAlchemyError as e:
            logging.error(f"Failed to reserve seat {data.seat_number}: {e}", exc_info=True)
            raise TransactionFailedError()
        logging.info(f"Booking {booking.id} confirmed for {data.movie_name}/{data.show_time}/{data.seat_number}")
        return booking

    async def cancel(self, db: AsyncSession, booking_id: int) -> Booking:
        try:
            async with db.begin():
                result = await db.execute(
                    select(Booking)
                    .where(Booking.id == booking_id)
                    .where(Booking.status == BookingStatus.CONFIRMED)
                    .with_for_update()
                    .execution_options(populate_existing=True))
                booking = result.scalar_one_or_none()
                if booking is None:
                    raise BookingNotCancellableError()

                booking.status = BookingStatus.CANCELLED
                await db.flush()
                await self.ledger.set_availability(
                    db, booking.movie_name, booking.show_time, booking.seat_number, True)
        except BookingError:
            raise
        except SQLAlchemyError as e:
            logging.error(f"Failed to cancel booking {booking_id}: {e}", exc_info=True)
            raise TransactionFailedError()
        logging.info(f"Booking {booking_id} cancelled")
        return booking

    async def delete(self, db: AsyncSession, booking_id: int) -> None:
        try:
            async with db.begin():
                result = await db.execute(
                    select(Booking)
                    .where(Booking.id == booking_id)
                    .with_for_update()
                    .execution_options(populate_existing=True))
                booking = result.scalar_one_or_none()
                if booking is None:
                    raise BookingNotFoundError()

                was_confirmed = booking.status == BookingStatus.CONFIRMED
                triple = (booking.movie_name, booking.show_time, booking.seat_number)
                await db.delete(booking)
                await db.flush()
                # a cancelled booking already released its seat
                if was_confirmed:
                    await self.ledger.set_availability(db, *triple, True)
        except BookingError:
            raise
        except SQLAlchemyError as e:
            logging.error(f"Failed to delete booking {booking_id}: {e}", exc_info=True)
            raise TransactionFailedError()
        logging.info(f"Booking {booking_id} deleted")

    async def update_contact_info(self, db: AsyncSession, booking_id: int, user_name: str, email: str, phone: str) -> None:
        validate_contact_info(user_name, email, phone)
        try:
            async with db.begin():
                result = await db.execute(
                    update(Booking)
                    .where(Booking.id == booking_id)
                    .values(user_name=user_name.strip(), email=email.strip(), phone=phone.strip()))
                if result.rowcount == 0:
                    raise BookingNotFoundError()
        except BookingError:
            raise
        except SQLAlchemyError as e:
            logging.error(f"Failed to update booking {booking_id}: {e}", exc_info=True)
            raise TransactionFailedError()

    async def list_bookings(self, db: AsyncSession) -> List[BookingDetailResponse]:
        result = await db.execute(
            BOOKING_WITH_SEAT.order_by(Booking.booking_date.desc(), Booking.id.desc()))
        return [_detail(row) for row in result.all()]

    async def get_booking(self, db: AsyncSession, booking_id: int) -> BookingDetailResponse:
        result = await db.execute(BOOKING_WITH_SEAT.where(Booking.id == booking_id))
        row = result.first()
        if row is None:
            raise BookingNotFoundError()
        return _detail(row)


crud_booking = CRUDBooking(ledger=crud_seat)

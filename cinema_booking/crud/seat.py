from decimal import Decimal
from typing import Iterable, List
from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from cinema_booking.models.seat import Seat, SeatType
from cinema_booking.schemas.seat import SeatAvailability

SEAT_ROWS = ["A", "B", "C", "D", "E"]
SEATS_PER_ROW = 10
PREMIUM_ROWS = {"A", "B"}
PREMIUM_PRICE = Decimal("200.00")
REGULAR_PRICE = Decimal("150.00")


def seat_for(movie: str, show_time: str, row: str, number: int) -> Seat:
    seat_type = SeatType.PREMIUM if row in PREMIUM_ROWS else SeatType.REGULAR
    return Seat(
        seat_number=f"{row}{number}",
        movie_name=movie,
        show_time=show_time,
        is_available=True,
        seat_type=seat_type,
        price=PREMIUM_PRICE if seat_type == SeatType.PREMIUM else REGULAR_PRICE,
    )


def _triple(movie: str, show_time: str, seat_number: str):
    return (
        Seat.movie_name == movie,
        Seat.show_time == show_time,
        Seat.seat_number == seat_number,
    )


class CRUDSeat:
    """
    Seat ledger: the source of truth for seat availability, price and type.
    Writes go through set_availability and are only issued by the booking
    transactions in crud.booking.
    """

    async def list_movies(self, db: AsyncSession) -> List[str]:
        result = await db.scalars(
            select(Seat.movie_name).distinct().order_by(Seat.movie_name))
        return list(result.all())

    async def list_show_times(self, db: AsyncSession, movie: str) -> List[str]:
        result = await db.scalars(
            select(Seat.show_time)
            .where(Seat.movie_name == movie)
            .distinct()
            .order_by(Seat.show_time))
        return list(result.all())

    async def list_seats(self, db: AsyncSession, movie: str, show_time: str) -> List[Seat]:
        result = await db.scalars(
            select(Seat)
            .where(Seat.movie_name == movie, Seat.show_time == show_time)
            .order_by(Seat.seat_number))
        return list(result.all())

    async def get_availability(self, db: AsyncSession, movie: str, show_time: str, seat_number: str, for_update: bool = False) -> SeatAvailability:
        stmt = (select(Seat)
                .where(*_triple(movie, show_time, seat_number))
                .execution_options(populate_existing=True))
        if for_update:
            stmt = stmt.with_for_update()  # pessimistic locking
        result = await db.execute(stmt)
        seat = result.scalar_one_or_none()
        if seat is None:
            return SeatAvailability(exists=False)
        return SeatAvailability(
            exists=True,
            is_available=seat.is_available,
            price=seat.price,
            seat_type=seat.seat_type,
        )

    async def set_availability(self, db: AsyncSession, movie: str, show_time: str, seat_number: str, value: bool) -> None:
        await db.execute(
            update(Seat)
            .where(*_triple(movie, show_time, seat_number))
            .values(is_available=value)
            .execution_options(synchronize_session="fetch"))

    async def count_seats(self, db: AsyncSession) -> int:
        return await db.scalar(select(func.count()).select_from(Seat))

    async def seed_catalog(self, db: AsyncSession, movies: Iterable[str], show_times: Iterable[str]) -> int:
        """
        Add one seat per movie x show time x row x number.
        Caller commits; rows A-B are premium, the rest regular.
        """
        show_times = list(show_times)
        seats = [
            seat_for(movie, show_time, row, number)
            for movie in movies
            for show_time in show_times
            for row in SEAT_ROWS
            for number in range(1, SEATS_PER_ROW + 1)
        ]
        db.add_all(seats)
        await db.flush()
        return len(seats)


crud_seat = CRUDSeat()

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cinema_booking.crud.seat import crud_seat
from cinema_booking.db.session import async_session as AsyncSessionLocal, close_db, init_db

MOVIES = ["Avengers: Endgame", "Spider-Man", "Batman"]
SHOW_TIMES = ["10:00 AM", "2:00 PM", "6:00 PM", "10:00 PM"]


async def seed(
        session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
        movies=MOVIES,
        show_times=SHOW_TIMES) -> int:
    """
    Seed the seat catalog if the seats table is empty.
    Returns the number of seats created (0 when the catalog already exists).
    Not safe to run from two processes at once.
    """
    async with session_factory() as session:
        if await crud_seat.count_seats(session) > 0:
            logging.info("Seat catalog already present, skipping seed")
            return 0
        created = await crud_seat.seed_catalog(session, movies, show_times)
        await session.commit()
        logging.info(f"Seeded {created} seats")
        return created


async def main():
    logging.basicConfig(level=logging.INFO)
    await init_db()
    try:
        await seed()
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cinema_booking.crud.seat import crud_seat
from cinema_booking.db.session import getDB_session
from cinema_booking.schemas.seat import SeatResponse

router = APIRouter()


@router.get("/movies", response_model=List[str])
async def list_movies(db: AsyncSession = Depends(getDB_session)):
    return await crud_seat.list_movies(db)


@router.get("/showtimes/{movie}", response_model=List[str])
async def list_show_times(movie: str, db: AsyncSession = Depends(getDB_session)):
    return await crud_seat.list_show_times(db, movie)


@router.get("/seats/{movie}/{showtime}", response_model=List[SeatResponse])
async def list_seats(movie: str, showtime: str, db: AsyncSession = Depends(getDB_session)):
    return await crud_seat.list_seats(db, movie, showtime)

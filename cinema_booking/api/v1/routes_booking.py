from typing import List
from fastapi import APIRouter, Depends, Request
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from cinema_booking.core.config import get_settings
from cinema_booking.core.idempotency import check_idempotency, compute_request_hash, save_idempotency
from cinema_booking.crud.booking import crud_booking
from cinema_booking.db.session import getDB_session
from cinema_booking.redis import get_redis
from cinema_booking.schemas.booking import (
    BookingActionResponse,
    BookingCreate,
    BookingCreatedResponse,
    BookingDetailResponse,
    BookingUpdate,
)

router = APIRouter(
    prefix="/bookings"
)


@router.post("", response_model=BookingCreatedResponse)
async def create_booking(
        data: BookingCreate,
        request: Request,
        db: AsyncSession = Depends(getDB_session),
        redis: Redis = Depends(get_redis)):
    request_hash = compute_request_hash(data.model_dump(mode="json"))
    idem_key, cached, is_repeat = await check_idempotency(request, redis, request_hash)
    if is_repeat:
        return cached
    booking = await crud_booking.reserve(db, data)
    response = BookingCreatedResponse(bookingId=booking.id).model_dump()
    await save_idempotency(redis, idem_key, request_hash, response, get_settings().IDEMPOTENCY_TTL_SECONDS)
    return response


@router.get("", response_model=List[BookingDetailResponse])
async def list_bookings(db: AsyncSession = Depends(getDB_session)):
    return await crud_booking.list_bookings(db)


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(booking_id: int, db: AsyncSession = Depends(getDB_session)):
    return await crud_booking.get_booking(db, booking_id)


@router.put("/{booking_id}", response_model=BookingActionResponse)
async def update_booking(booking_id: int, data: BookingUpdate, db: AsyncSession = Depends(getDB_session)):
    await crud_booking.update_contact_info(db, booking_id, data.user_name, data.email, data.phone)
    return BookingActionResponse(message="Booking updated successfully")


@router.put("/{booking_id}/cancel", response_model=BookingActionResponse)
async def cancel_booking(booking_id: int, db: AsyncSession = Depends(getDB_session)):
    await crud_booking.cancel(db, booking_id)
    return BookingActionResponse(message="Booking cancelled successfully")


@router.delete("/{booking_id}", response_model=BookingActionResponse)
async def delete_booking(booking_id: int, db: AsyncSession = Depends(getDB_session)):
    await crud_booking.delete(db, booking_id)
    return BookingActionResponse(message="Booking deleted successfully")

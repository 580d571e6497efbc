import asyncio

import pytest
from sqlalchemy import func, select

from cinema_booking.core.exceptions import BookingNotCancellableError, SeatUnavailableError
from cinema_booking.crud.booking import crud_booking
from cinema_booking.crud.seat import crud_seat
from cinema_booking.models.booking import Booking, BookingStatus


async def confirmed_bookings_for(session_factory, seat_number, show_time="10:00 AM"):
    async with session_factory() as session:
        return await session.scalar(
            select(func.count(Booking.id))
            .where(Booking.movie_name == "Demo")
            .where(Booking.show_time == show_time)
            .where(Booking.seat_number == seat_number)
            .where(Booking.status == BookingStatus.CONFIRMED))


@pytest.mark.asyncio
async def test_concurrent_same_seat_booking(db_session_factory, booking_request):
    """Test concurrent reserve attempts on the same seat - only one should succeed."""
    num_of_concurrent_requests = 10

    async def make_request(booking_num):
        """Make a reserve request with its own session, like a separate HTTP request."""
        async with db_session_factory() as session:
            try:
                booking = await crud_booking.reserve(
                    session, booking_request(user_name=f"Customer {booking_num}"))
                return {"success": True, "booking_id": booking.id, "request": booking_num}
            except SeatUnavailableError:
                return {"success": False, "error": "unavailable", "request": booking_num}
            except Exception as e:
                return {"success": False, "error": str(e), "request": booking_num}

    results = await asyncio.gather(*[make_request(i) for i in range(num_of_concurrent_requests)])

    successful_bookings = [r for r in results if r["success"]]
    failed_bookings = [r for r in results if not r["success"]]

    assert len(
        successful_bookings) == 1, f"Expected 1 success, got {len(successful_bookings)}. Results: {successful_bookings}"
    assert len(failed_bookings) == num_of_concurrent_requests - 1
    assert all(
        r["error"] == "unavailable" for r in failed_bookings), f"Not all failures were seat conflicts. Results: {failed_bookings}"
    assert await confirmed_bookings_for(db_session_factory, "A1") == 1


@pytest.mark.asyncio
async def test_concurrent_different_seats(db_session_factory, booking_request):
    """
    Test: Multiple users book different seats at the same time
    Expected: every booking succeeds
    """
    seat_numbers = ["A1", "A2", "B7", "C3", "E10"]

    async def make_request(seat_number):
        async with db_session_factory() as session:
            try:
                booking = await crud_booking.reserve(session, booking_request(seat_number=seat_number))
                return {"success": True, "booking_id": booking.id}
            except SeatUnavailableError:
                return {"success": False, "error": "unavailable"}

    results = await asyncio.gather(*[make_request(seat) for seat in seat_numbers])

    assert all(r["success"] for r in results), f"Results: {results}"
    async with db_session_factory() as session:
        seats = await crud_seat.list_seats(session, "Demo", "10:00 AM")
    unavailable = sorted(seat.seat_number for seat in seats if not seat.is_available)
    assert unavailable == sorted(seat_numbers)


@pytest.mark.asyncio
async def test_concurrent_overlapping_seat_requests(db_session_factory, booking_request):
    seat_requests = ["A1", "A2", "A1", "A2", "A3", "A1"]

    async def make_request(seat_number):
        async with db_session_factory() as session:
            try:
                await crud_booking.reserve(session, booking_request(seat_number=seat_number))
                return {"success": True, "seat": seat_number}
            except SeatUnavailableError:
                return {"success": False, "seat": seat_number}

    results = await asyncio.gather(*[make_request(seat) for seat in seat_requests])

    successful_seats = sorted(r["seat"] for r in results if r["success"])
    assert successful_seats == ["A1", "A2", "A3"], f"Results: {results}"
    for seat_number in ["A1", "A2", "A3"]:
        assert await confirmed_bookings_for(db_session_factory, seat_number) == 1


@pytest.mark.asyncio
async def test_concurrent_cancel_of_same_booking(db_session_factory, booking_request):
    async with db_session_factory() as session:
        booking = await crud_booking.reserve(session, booking_request())

    async def make_request():
        async with db_session_factory() as session:
            try:
                await crud_booking.cancel(session, booking.id)
                return "cancelled"
            except BookingNotCancellableError:
                return "not_cancellable"

    results = await asyncio.gather(*[make_request() for _ in range(5)])

    assert results.count("cancelled") == 1
    assert results.count("not_cancellable") == 4


@pytest.mark.asyncio
async def test_cancel_and_rebook_race_keeps_one_confirmed(db_session_factory, booking_request):
    """A cancel racing with new reserve attempts never leaves two confirmed bookings."""
    async with db_session_factory() as session:
        booking = await crud_booking.reserve(session, booking_request())

    async def cancel():
        async with db_session_factory() as session:
            await crud_booking.cancel(session, booking.id)
            return "cancelled"

    async def rebook(num):
        async with db_session_factory() as session:
            try:
                await crud_booking.reserve(session, booking_request(user_name=f"Customer {num}"))
                return "booked"
            except SeatUnavailableError:
                return "unavailable"

    results = await asyncio.gather(cancel(), *[rebook(i) for i in range(5)])

    assert results[0] == "cancelled"
    assert results.count("booked") <= 1
    expected_confirmed = results.count("booked")
    assert await confirmed_bookings_for(db_session_factory, "A1") == expected_confirmed
    async with db_session_factory() as session:
        seat = await crud_seat.get_availability(session, "Demo", "10:00 AM", "A1")
    assert seat.is_available == (expected_confirmed == 0)

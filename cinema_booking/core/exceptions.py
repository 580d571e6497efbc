class BookingError(Exception):
    code = "booking_error"

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class SeatNotFoundError(BookingError):
    code = "seat_not_found"

    def __init__(self):
        super().__init__("Seat not found", status_code=400)


class SeatUnavailableError(BookingError):
    code = "seat_unavailable"

    def __init__(self):
        super().__init__("Seat already booked, please choose another seat", status_code=400)


class BookingNotFoundError(BookingError):
    code = "not_found"

    def __init__(self):
        super().__init__("Booking not found", status_code=404)


class BookingNotCancellableError(BookingError):
    code = "not_cancellable"

    def __init__(self):
        super().__init__("Booking not found or already cancelled", status_code=404)


class TransactionFailedError(BookingError):
    code = "transaction_failed"

    def __init__(self, message: str = "Transaction failed, please retry later"):
        super().__init__(message, status_code=500)


class ValidationFailedError(BookingError):
    code = "validation_failed"

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class IdempotencyConflictError(BookingError):
    code = "idempotency_conflict"

    def __init__(self):
        super().__init__("Idempotency key already used for a different booking request", status_code=409)

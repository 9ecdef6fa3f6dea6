from fastapi import status


class BookingError(Exception):
    """Base for errors that map to a JSON `{"error": ...}` response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(BookingError):
    # Clients expect 400 for an already-booked slot, not 409
    status_code = status.HTTP_400_BAD_REQUEST


class MethodNotAllowed(BookingError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED

    def __init__(self, message: str = "Method not allowed") -> None:
        super().__init__(message)


class InternalError(BookingError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StoredDataError(InternalError):
    """A value read back from storage does not have the expected shape."""

class BookingServiceError(Exception):
    """Base error; handlers render it as {"error": message} with status_code."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingServiceError):
    status_code = 400


class ConflictError(BookingServiceError):
    status_code = 409


class NotFoundError(BookingServiceError):
    status_code = 404


class NotificationError(BookingServiceError):
    """Mail transport rejected the message. Any preceding DB write is already committed."""

    status_code = 500


class DependencyError(BookingServiceError):
    status_code = 500

from typing import Any


class BookingValidationError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidStayError(BookingValidationError):
    pass


class InvalidTotalError(BookingValidationError):
    pass


class InvalidAmountError(BookingValidationError):
    pass


class MissingStayDetailsError(BookingValidationError):
    pass


class ConfigurationError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UpstreamPaymentError(Exception):
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class UpstreamDeliveryError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class RedirectProtocolError(UpstreamDeliveryError):
    """A redirect could not be followed: no Location, or too many hops."""

class DomainError(Exception):
    """Base class for errors raised by the reservation domain."""


class NotFoundError(DomainError):
    pass


class ClientNotFoundError(NotFoundError):
    pass


class ReservationNotFoundError(NotFoundError):
    pass


class PropertyNotFoundError(NotFoundError):
    pass


class ValidationError(DomainError):
    pass


class PastDateError(ValidationError):
    pass


class InvalidRangeError(ValidationError):
    pass


class InvalidGuestCountError(ValidationError):
    pass


class InvalidEmailError(ValidationError):
    pass


class InvalidPriceError(ValidationError):
    pass


class DuplicateEmailError(DomainError):
    pass


class DuplicateIdError(DomainError):
    pass

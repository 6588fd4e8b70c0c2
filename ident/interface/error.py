"""Interface layer errors."""


class InterfaceError(Exception):
    """Base interface error."""

    pass


class UnauthorizedError(InterfaceError):
    """Raised when a request carries no usable access token."""

    def __init__(self, message: str = "Missing access token"):
        super().__init__(message)

"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class ProviderError(AdapterError):
    """External OAuth provider error.

    Raised when a token exchange or profile request fails.
    """

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(message)

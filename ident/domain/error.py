"""Domain layer errors.

These are caller-facing: the interface layer maps each one to a status
code. Value-object format failures are a separate, lower-level family and
surface as ``pydantic.ValidationError``.
"""


class DomainError(Exception):
    """Base domain error."""

    pass


class EmailAlreadyTakenError(DomainError):
    """Raised when an email is already registered to a user."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email {email} is already taken")


class AccountAlreadyLinkedError(DomainError):
    """Raised when a (provider, provider user id) pair is already linked."""

    def __init__(self, provider: str, provider_user_id: str):
        self.provider = provider
        self.provider_user_id = provider_user_id
        super().__init__(
            f"Account (provider={provider}, provider_user_id={provider_user_id}) "
            "is already linked"
        )


class InvalidCredentialsError(DomainError):
    """Raised for any failed local login.

    The message never varies, whatever the cause.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class ProviderNotConfiguredError(DomainError):
    """Raised when no OAuth adapter is registered for a provider."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Provider {provider} is not configured")


class OAuthStateExpiredError(DomainError):
    """Raised when an OAuth state is unknown, consumed, mismatched or expired."""

    def __init__(self) -> None:
        super().__init__("OAuth state is expired or invalid")


class OAuthProfileEmailRequiredError(DomainError):
    """Raised when a new identity's provider profile carries no email."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"OAuth profile from provider {provider} is missing email")


class UserNotFoundError(DomainError):
    """Raised when a user id does not resolve to a user."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} was not found")


class InvalidTokenError(DomainError):
    """Raised when an access token fails verification."""

    def __init__(self, reason: str = "Invalid token"):
        self.reason = reason
        super().__init__(reason)

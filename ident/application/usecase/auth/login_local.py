"""Local login use case."""

import logfire
from pydantic import BaseModel, Field, ValidationError

from ident.application.usecase.base import BaseUseCase
from ident.domain.error import InvalidCredentialsError
from ident.domain.service import PasswordHasher, TokenPayload, TokenService, UserService
from ident.domain.value import Email

from .common import AccessTokenInfo, AuthenticatedUser, AuthResponse


class LoginLocalRequest(BaseModel):
    """Local login request."""

    email: str
    password: str = Field(min_length=1, repr=False)


class LoginLocalUseCase(BaseUseCase):
    """Use case for email/password login.

    Every failure raises the same InvalidCredentialsError so callers cannot
    tell an unknown email from a wrong password or a federated-only user.
    """

    def __init__(
        self,
        user_service: UserService,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        """Initialize login use case.

        Args:
            user_service: User domain service
            password_hasher: Password hashing port
            token_service: Token issuance port
        """
        self.user_service = user_service
        self.password_hasher = password_hasher
        self.token_service = token_service

    async def execute(self, request: LoginLocalRequest) -> AuthResponse:
        """Verify credentials and issue an access token.

        Raises:
            InvalidCredentialsError: On any credential failure
        """
        with logfire.span("login_local"):
            try:
                email = Email(request.email)
            except ValidationError:
                await self.password_hasher.hash(request.password)
                logfire.warn("Login failed: malformed email")
                raise InvalidCredentialsError() from None

            user = await self.user_service.find_by_email(email)

            if user is None or user.password_hash is None:
                # Hash anyway so both branches cost one KDF run
                await self.password_hasher.hash(request.password)
                logfire.warn("Login failed: no local credentials")
                raise InvalidCredentialsError()

            if not await self.password_hasher.verify(
                request.password, user.password_hash
            ):
                logfire.warn("Login failed: password mismatch", user_id=str(user.id))
                raise InvalidCredentialsError()

            access_token = self.token_service.sign_access_token(
                TokenPayload.for_user(user)
            )

            logfire.info("Local login succeeded", user_id=str(user.id))
            return AuthResponse(
                user=AuthenticatedUser.from_user(user),
                access_token=AccessTokenInfo.from_token(access_token),
            )

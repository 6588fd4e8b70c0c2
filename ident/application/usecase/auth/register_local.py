"""Register local user use case."""

import logfire
from pydantic import BaseModel, Field

from ident.application.usecase.base import BaseUseCase
from ident.domain.error import EmailAlreadyTakenError
from ident.domain.model import User
from ident.domain.service import PasswordHasher, TokenPayload, TokenService, UserService
from ident.domain.value import Email, Name

from .common import AccessTokenInfo, AuthenticatedUser, AuthResponse

PASSWORD_MIN_LENGTH = 8


class RegisterLocalUserRequest(BaseModel):
    """Local registration request."""

    name: str
    email: str
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, repr=False)


class RegisterLocalUserUseCase(BaseUseCase):
    """Use case for email/password registration."""

    def __init__(
        self,
        user_service: UserService,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        """Initialize register use case.

        Args:
            user_service: User domain service
            password_hasher: Password hashing port
            token_service: Token issuance port
        """
        self.user_service = user_service
        self.password_hasher = password_hasher
        self.token_service = token_service

    async def execute(self, request: RegisterLocalUserRequest) -> AuthResponse:
        """Register a user and sign them in.

        Steps:
        1. Normalize email and name (format errors raise ValidationError)
        2. Reject an email that is already registered
        3. Hash the password and build the user
        4. Persist; storage has the final word on email uniqueness
        5. Issue an access token

        Raises:
            pydantic.ValidationError: If email or name is malformed
            EmailAlreadyTakenError: If the email is registered
        """
        email = Email(request.email)
        name = Name(request.name)

        with logfire.span("register_local_user"):
            if await self.user_service.find_by_email(email) is not None:
                logfire.warn("Registration rejected: email taken")
                raise EmailAlreadyTakenError(email.root)

            password_hash = await self.password_hasher.hash(request.password)
            user = User.create_local(
                name=name, email=email, password_hash=password_hash
            )
            user = await self.user_service.register(user)

            access_token = self.token_service.sign_access_token(
                TokenPayload.for_user(user)
            )

            logfire.info("Local user registered", user_id=str(user.id))
            return AuthResponse(
                user=AuthenticatedUser.from_user(user),
                access_token=AccessTokenInfo.from_token(access_token),
            )

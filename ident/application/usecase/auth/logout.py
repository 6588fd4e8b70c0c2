"""Logout use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from ident.application.usecase.base import BaseUseCase
from ident.domain.value import parse_user_id


class LogoutRequest(BaseModel):
    """Logout request."""

    user_id: str | UUID


class LogoutResponse(BaseModel):
    """Logout response."""

    user_id: str


class LogoutUseCase(BaseUseCase):
    """Use case for logging out.

    Stateless: issued tokens stay valid until they expire. The interface
    layer clears the client's cookie.
    """

    async def execute(self, request: LogoutRequest) -> LogoutResponse:
        """Normalize the user id and acknowledge.

        Raises:
            ValueError: If the id is not a UUID
        """
        user_id = parse_user_id(request.user_id)
        logfire.info("User logged out", user_id=str(user_id))
        return LogoutResponse(user_id=str(user_id))

"""Get current user use case."""

from uuid import UUID

from pydantic import BaseModel

from ident.application.usecase.base import BaseUseCase
from ident.domain.service import UserService
from ident.domain.value import parse_user_id

from .common import AuthenticatedUser


class GetMeRequest(BaseModel):
    """Get current user request."""

    user_id: str | UUID  # Token subject


class GetMeResponse(BaseModel):
    """Get current user response."""

    user: AuthenticatedUser


class GetMeUseCase(BaseUseCase):
    """Use case for loading the authenticated user."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize get me use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: GetMeRequest) -> GetMeResponse:
        """Load the user's public projection.

        Raises:
            ValueError: If the id is not a UUID
            UserNotFoundError: If no such user exists
        """
        user = await self.user_service.get_by_id(parse_user_id(request.user_id))
        return GetMeResponse(user=AuthenticatedUser.from_user(user))

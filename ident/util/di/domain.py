"""Domain layer DI providers."""

from dishka import Scope, provide

from ident.domain.repository import AccountRepository, UserRepository
from ident.domain.service import UserService
from ident.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_user_service(
        self,
        user_repository: UserRepository,
        account_repository: AccountRepository,
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository, account_repository=account_repository
        )

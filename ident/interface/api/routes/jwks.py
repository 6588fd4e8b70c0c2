"""Public key discovery routes."""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from ident.domain.service import TokenService

router = APIRouter(tags=["keys"], route_class=DishkaRoute)


@router.get("/.well-known/jwks.json")
async def jwks(token_service: FromDishka[TokenService]) -> dict[str, Any]:
    """Public JWK set for verifying access tokens."""
    return token_service.get_public_jwks()

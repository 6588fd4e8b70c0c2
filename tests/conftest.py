"""Test configuration and fixtures."""

import os
from datetime import timedelta

import argon2
import logfire
import pytest

from ident.adapter.crypto import Argon2PasswordHasher, JWTTokenService
from ident.adapter.crypto.jwt_token_service import generate_signing_key
from tests.fakes import AUDIENCE, ISSUER, CountingRandom, FakeClock

# Settings are read lazily, when a container first resolves them
os.environ.setdefault("ENVIRONMENT", "test")

# Keep spans local and quiet during tests
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def random_bytes() -> CountingRandom:
    return CountingRandom()


@pytest.fixture
def password_hasher() -> Argon2PasswordHasher:
    """Argon2id with low cost parameters, so tests stay fast."""
    return Argon2PasswordHasher(
        argon2.PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)
    )


@pytest.fixture
def token_service(clock: FakeClock) -> JWTTokenService:
    return JWTTokenService(
        signing_key=generate_signing_key("EdDSA"),
        issuer=ISSUER,
        audience=AUDIENCE,
        ttl=timedelta(minutes=15),
        clock=clock,
    )

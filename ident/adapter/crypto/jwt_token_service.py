"""JWT access token service.

Tokens are signed asymmetrically so other services can verify them using
only the published JWK set. Keys are handled with jwcrypto; signing and
claim validation use PyJWT.
"""

from datetime import timedelta
from typing import Any
from uuid import uuid4

import jwt
import logfire
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from jwcrypto import jwk
from jwcrypto.common import JWException
from pydantic import ValidationError

from ident.config import Settings
from ident.domain.error import InvalidTokenError
from ident.domain.service import AccessToken, TokenPayload, TokenService
from ident.util.clock import Clock, utc_now
from ident.util.error import ConfigurationError

REQUIRED_CLAIMS = ["sub", "email", "iat", "exp", "iss", "aud"]


def generate_signing_key(algorithm: str) -> jwk.JWK:
    """Generate a fresh private key for the given JWS algorithm.

    Args:
        algorithm: One of EdDSA (Ed25519), ES256 (P-256), RS256 (RSA 2048)

    Returns:
        Private JWK with a thumbprint key id
    """
    if algorithm == "EdDSA":
        private_key = ed25519.Ed25519PrivateKey.generate()
    elif algorithm == "ES256":
        private_key = ec.generate_private_key(ec.SECP256R1())
    elif algorithm == "RS256":
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    else:
        raise ConfigurationError(f"Unsupported signing algorithm: {algorithm}")

    key = jwk.JWK.from_pyca(private_key)
    # Newer jwcrypto releases already set a kid
    params = key.export(as_dict=True)
    params.setdefault("kid", key.thumbprint())
    return jwk.JWK(**params)


class JWTTokenService(TokenService):
    """Signs and verifies access tokens with one asymmetric key."""

    def __init__(
        self,
        signing_key: jwk.JWK,
        issuer: str,
        audience: str,
        algorithm: str = "EdDSA",
        ttl: timedelta = timedelta(minutes=15),
        clock: Clock = utc_now,
    ) -> None:
        """Initialize token service.

        Args:
            signing_key: Private JWK
            issuer: Value of the ``iss`` claim
            audience: Value of the ``aud`` claim
            algorithm: JWS algorithm matching the key type
            ttl: Access token lifetime
            clock: Time source for ``iat``/``exp`` and expiry checks

        Raises:
            ConfigurationError: If the key has no private part
        """
        if not signing_key.has_private:
            raise ConfigurationError("Signing key must include its private part")

        self.issuer = issuer
        self.audience = audience
        self.algorithm = algorithm
        self.ttl = ttl
        self.clock = clock

        self.kid = signing_key.get("kid") or signing_key.thumbprint()
        self._private_pem = signing_key.export_to_pem(private_key=True, password=None)
        self._public_pem = signing_key.export_to_pem()
        self._public_jwk = {
            **signing_key.export_public(as_dict=True),
            "kid": self.kid,
            "alg": algorithm,
            "use": "sig",
        }

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Clock = utc_now
    ) -> "JWTTokenService":
        """Build the service from auth settings.

        Without a configured key, development and test environments get an
        ephemeral key (tokens do not survive a restart); production refuses.

        Raises:
            ConfigurationError: If no key is configured in production, or the
                configured key is not valid JWK JSON
        """
        auth = settings.auth

        if auth.jwt_private_jwk:
            try:
                key = jwk.JWK.from_json(auth.jwt_private_jwk)
            except (ValueError, JWException) as e:
                raise ConfigurationError(f"Invalid AUTH__JWT_PRIVATE_JWK: {e}") from e
        elif settings.environment == "production":
            raise ConfigurationError("AUTH__JWT_PRIVATE_JWK is required in production")
        else:
            key = generate_signing_key(auth.jwt_algorithm)
            logfire.warn(
                "No signing key configured, using an ephemeral key",
                environment=settings.environment,
                kid=key.get("kid"),
            )

        return cls(
            signing_key=key,
            issuer=auth.jwt_issuer,
            audience=auth.jwt_audience,
            algorithm=auth.jwt_algorithm,
            ttl=timedelta(seconds=auth.access_token_ttl_seconds),
            clock=clock,
        )

    def sign_access_token(self, payload: TokenPayload) -> AccessToken:
        issued_at = self.clock()
        expires_at = issued_at + self.ttl

        claims = {
            **payload.model_dump(by_alias=True, exclude_none=True),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "iss": self.issuer,
            "aud": self.audience,
            "jti": str(uuid4()),
        }

        token = jwt.encode(
            claims,
            self._private_pem,
            algorithm=self.algorithm,
            headers={"kid": self.kid, "typ": "JWT"},
        )

        logfire.info("Access token signed", sub=payload.sub, kid=self.kid)
        return AccessToken(token=token, expires_at=expires_at.replace(microsecond=0))

    def verify(self, token: str) -> TokenPayload:
        try:
            header = jwt.get_unverified_header(token)
            if header.get("kid") != self.kid:
                raise InvalidTokenError("Unknown signing key")

            # Expiry is checked below against the injected clock
            claims = jwt.decode(
                token,
                self._public_pem,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidAudienceError:
            raise InvalidTokenError("Invalid token audience") from None
        except jwt.InvalidIssuerError:
            raise InvalidTokenError("Invalid token issuer") from None
        except jwt.InvalidTokenError:
            raise InvalidTokenError() from None

        exp = claims["exp"]
        if not isinstance(exp, (int, float)) or exp <= self.clock().timestamp():
            raise InvalidTokenError("Token has expired")

        try:
            return TokenPayload.model_validate(claims)
        except ValidationError:
            raise InvalidTokenError("Malformed token claims") from None

    def get_public_jwks(self) -> dict[str, Any]:
        return {"keys": [dict(self._public_jwk)]}

"""PKCE (Proof Key for Code Exchange) utilities for OAuth security."""

from base64 import urlsafe_b64encode
from hashlib import sha256

from ident.util.clock import RandomBytes

STATE_BYTES = 16
CODE_VERIFIER_BYTES = 32
NONCE_BYTES = 16


def base64url(data: bytes) -> str:
    """Base64url-encode without padding."""
    return urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def generate_token(random_bytes: RandomBytes, length: int) -> str:
    """Draw ``length`` random bytes and encode them as a URL-safe token."""
    return base64url(random_bytes(length))


def code_challenge_s256(verifier: str) -> str:
    """S256 challenge: base64url(SHA-256(verifier)).

    The verifier is kept by the server and sent during token exchange; the
    challenge goes in the authorization request.
    """
    return base64url(sha256(verifier.encode("ascii")).digest())

"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- Temporary password generation
"""
from __future__ import annotations

import secrets
import string
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from services.exceptions import TokenExpired, TokenInvalid

ACCESS = "access"
REFRESH = "refresh"

# Claims added by the codec itself; stripped again on decode
_REGISTERED_CLAIMS = ("exp", "iat", "iss", "jti", "type")


class Argon2PasswordEncoder:
    """One-way password hashing: encode() to store, matches() to check."""

    def __init__(self, hasher: PasswordHasher | None = None):
        self.ph = hasher or PasswordHasher()

    def encode(self, password: str) -> str:
        """Hash a plaintext password using Argon2
        """
        return self.ph.hash(password)

    def matches(self, password: str, password_hash: str) -> bool:
        """ Verify a plaintext password against a stored argon2 hash
        """
        try:
            return self.ph.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False


_SPECIALS = "!@#$%^&*"


def generate_temp_password(length: int = 10) -> str:
    """Random password with at least one letter, one digit and one special character."""
    if length < 3:
        raise ValueError("length must be at least 3")
    alphabet = string.ascii_letters + string.digits + _SPECIALS
    chars = [
        secrets.choice(string.ascii_letters),
        secrets.choice(string.digits),
        secrets.choice(_SPECIALS),
    ]
    chars += [secrets.choice(alphabet) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """
    Signs and verifies expiring JWTs that carry a claims mapping.

    decode() raises TokenExpired once exp has passed and TokenInvalid for any
    other failure (bad signature, malformed token, wrong issuer).
    """

    def __init__(self, secret: str, algorithm: str = "HS256", issuer: str = "member-api"):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer

    @classmethod
    def from_config(cls, config) -> "TokenCodec":
        return cls(
            secret=config["JWT_SECRET"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER", "member-api"),
        )

    def encode(self, kind: str, ttl_days: float, claims: Dict[str, Any]) -> str:
        now = _now()
        payload = dict(claims)
        payload.update(
            {
                "iss": self.issuer,
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(days=ttl_days)).timestamp()),
                "jti": generate_jti(),
                "type": kind,
            }
        )
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def _decode_raw(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired("Token expired")
        except jwt.InvalidTokenError as exc:
            raise TokenInvalid(f"Invalid token: {exc}")

    @staticmethod
    def _claims_only(decoded: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in decoded.items() if k not in _REGISTERED_CLAIMS}

    def decode(self, token: str) -> Dict[str, Any]:
        """Verify signature and expiration, return the caller's claims."""
        return self._claims_only(self._decode_raw(token))

    def decode_with_kind(self, token: str, expected_kind: str) -> Dict[str, Any]:
        """Like decode(), but also reject tokens of another kind."""
        decoded = self._decode_raw(token)
        if decoded.get("type") != expected_kind:
            raise TokenInvalid("Wrong token type")
        return self._claims_only(decoded)

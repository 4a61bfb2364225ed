"""
Security utilities for JWT authentication and password hashing.

Implements stateless JWT authentication signed with a shared secret (HS256 by
default). Passwords are hashed using bcrypt for security.

Both services are built from an explicit ``Settings`` instance in
``create_app`` rather than reading configuration at call time.
"""

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from passlib.exc import PasswordValueError

from app.core.config import Settings
from app.core.exceptions import CorruptDigest
from app.models.user import Role

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72

# Compared against when no account exists, so unknown emails cost a full hash
DUMMY_PASSWORD = "not-a-real-password"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PasswordHasher:
    """Salted, iterated one-way hashing backed by passlib's bcrypt handler."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        self._dummy_digest: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(rounds=settings.PASSWORD_HASH_ROUNDS)

    @staticmethod
    def _encode(password: str) -> bytes:
        # Bcrypt has a 72-byte limit - truncate if necessary
        return password.encode('utf-8')[:BCRYPT_MAX_BYTES]

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        The digest embeds its own salt and cost factor, so verification needs
        no separately stored salt.
        """
        return self._context.hash(self._encode(password))

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plain password against a hashed password.

        Returns False on mismatch, including secrets bcrypt refuses to hash
        (NUL bytes). Raises CorruptDigest if the stored digest cannot be parsed.
        """
        try:
            return self._context.verify(self._encode(plain_password), hashed_password)
        except PasswordValueError:
            return False
        except (ValueError, TypeError) as e:
            logger.error(f"Unreadable password digest: {e}")
            raise CorruptDigest() from e

    def dummy_verify(self, plain_password: str) -> bool:
        """
        Spend the same bcrypt work as ``verify`` for a login with no account.

        Always returns False.
        """
        if self._dummy_digest is None:
            self._dummy_digest = self.hash(DUMMY_PASSWORD)
        self.verify(plain_password, self._dummy_digest)
        return False


class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidToken(TokenError):
    """Signature mismatch, malformed token, missing claims or revoked token id."""


class ExpiredToken(TokenError):
    """The token's embedded expiry has been reached."""


@dataclass(frozen=True)
class TokenIdentity:
    """Identity claims recovered from a verified token."""
    identity_id: int
    email: str
    role: Role
    jti: str
    expires_at: datetime


class TokenDenylist:
    """
    In-memory set of revoked token ids.

    Entries are kept only until the revoked token would have expired anyway,
    so the set stays bounded by the number of tokens revoked per TTL window.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utcnow
        self._revoked: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def add(self, jti: str, expires_at: datetime) -> None:
        with self._lock:
            self._prune()
            self._revoked[jti] = expires_at

    def __contains__(self, jti: str) -> bool:
        with self._lock:
            self._prune()
            return jti in self._revoked

    def __len__(self) -> int:
        with self._lock:
            self._prune()
            return len(self._revoked)

    def _prune(self) -> None:
        now = self._clock()
        for jti in [j for j, exp in self._revoked.items() if exp <= now]:
            del self._revoked[jti]


class TokenService:
    """Issues and verifies signed, time-limited identity tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        denylist: Optional[TokenDenylist] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl
        self.denylist = denylist
        self._clock = clock or utcnow

    @classmethod
    def from_settings(cls, settings: Settings, clock: Optional[Callable[[], datetime]] = None) -> "TokenService":
        denylist = TokenDenylist(clock=clock) if settings.TOKEN_REVOCATION_ENABLED else None
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            ttl=timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
            denylist=denylist,
            clock=clock,
        )

    @property
    def revocation_enabled(self) -> bool:
        return self.denylist is not None

    def issue(self, identity_id: int, email: str, role: Role) -> str:
        """
        Create a JWT access token.

        Args:
            identity_id: User id, stored in the ``sub`` claim
            email: User email
            role: User role

        Returns:
            Encoded JWT token as a string
        """
        now = self._clock()
        expire = now + self.ttl
        to_encode = {
            "sub": str(identity_id),
            "email": email,
            "role": Role(role).value,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
            "jti": secrets.token_hex(16),
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenIdentity:
        """
        Decode and validate a JWT token.

        Raises:
            InvalidToken: If the signature or claims are invalid, or the token was revoked
            ExpiredToken: If the current time is at or past the embedded expiry
        """
        try:
            # Expiry is checked below against the injectable clock
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            raise InvalidToken(str(e)) from e

        try:
            identity_id = int(payload["sub"])
            email = payload["email"]
            role = Role(payload["role"])
            jti = payload["jti"]
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidToken(f"Malformed claims: {e}") from e

        if self._clock() >= expires_at:
            raise ExpiredToken(f"Token expired at {expires_at.isoformat()}")

        if self.denylist is not None and jti in self.denylist:
            raise InvalidToken("Token has been revoked")

        return TokenIdentity(
            identity_id=identity_id,
            email=email,
            role=role,
            jti=jti,
            expires_at=expires_at,
        )

    def revoke(self, identity: TokenIdentity) -> bool:
        """
        Revoke a verified token until its natural expiry.

        Returns False when revocation is disabled; logout is then purely a
        client-side discard.
        """
        if self.denylist is None:
            return False
        self.denylist.add(identity.jti, identity.expires_at)
        return True

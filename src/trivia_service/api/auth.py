"""
Admin session tokens.

A successful login issues an HMAC-SHA256 signed token "<issued>.<sig>"
stored in the admin_token cookie. The token carries no password material;
it is valid until ADMIN_SESSION_TTL_SECONDS after issue. Rotating
ADMIN_SESSION_SECRET (or the password, when no secret is set) invalidates
every outstanding session.
"""

import hashlib
import hmac
import time
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)

ADMIN_COOKIE_NAME = "admin_token"
SESSION_SUBJECT = "admin"
CLOCK_SKEW_SECONDS = 60


class AdminSessionSigner:
    """Check the admin password and sign/verify session tokens."""

    def __init__(
        self,
        password: str,
        secret: str = "",
        ttl_seconds: int = 86400,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._password = password
        # Without an explicit secret, derive one from the password so that
        # tokens are still unforgeable and die with a password change.
        self._secret = secret or hashlib.sha256(f"admin-session:{password}".encode()).hexdigest()
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return bool(self._password)

    def check_password(self, candidate: Optional[str]) -> bool:
        if not self._password or candidate is None:
            return False
        return hmac.compare_digest(candidate.encode(), self._password.encode())

    def _sign(self, issued_at: int) -> str:
        message = f"{issued_at}:{SESSION_SUBJECT}"
        return hmac.new(self._secret.encode(), message.encode(), hashlib.sha256).hexdigest()

    def issue(self, issued_at: Optional[float] = None) -> str:
        """Return a fresh session token."""
        ts = int(issued_at if issued_at is not None else self._clock())
        return f"{ts}.{self._sign(ts)}"

    def verify(self, token: Optional[str]) -> bool:
        """True if token was issued by this signer and has not expired."""
        if not token or not self.enabled:
            return False

        try:
            issued_part, received_sig = token.split(".", 1)
            issued_at = int(issued_part)
        except ValueError:
            logger.warning("Malformed admin session token")
            return False

        now = self._clock()
        if issued_at > now + CLOCK_SKEW_SECONDS or now - issued_at > self.ttl_seconds:
            logger.info("Admin session token expired")
            return False

        return hmac.compare_digest(received_sig, self._sign(issued_at))

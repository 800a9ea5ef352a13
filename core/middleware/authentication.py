"""
Authentication gate for administrator tokens.

Decides, per request, whether an administrator token is required, exempt,
or self-bootstrapping:

1. While the admin table is empty every request passes without a token
2. Otherwise the Authorization header must carry ``Bearer <JWT>``
3. The JWT must verify against the shared secret and not be expired
4. The verified identity is attached to the request for role checks

The decision itself is a pure function so it can be exercised without a
database; ``api.dependencies`` feeds it the live admin count.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import jwt

from core.errors import ErrorCode, InternalServerError, UnauthorizedError
from core.security import AdminIdentity, verify_jwt_token

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


class AuthDecision(str, Enum):
    """Outcome of evaluating a request's credentials."""
    ALLOW_BOOTSTRAP = "allow_bootstrap"
    REJECT_MISSING = "reject_missing"
    REJECT_MALFORMED = "reject_malformed"
    REJECT_INVALID = "reject_invalid"
    ALLOW_IDENTITY = "allow_identity"


@dataclass(frozen=True)
class AuthResult:
    decision: AuthDecision
    identity: Optional[AdminIdentity] = None
    reason: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.decision in (AuthDecision.ALLOW_BOOTSTRAP, AuthDecision.ALLOW_IDENTITY)


# Rejection -> (message, code) returned to the client
REJECTION_RESPONSES: dict[AuthDecision, tuple[str, ErrorCode]] = {
    AuthDecision.REJECT_MISSING: ("Missing authorization header", ErrorCode.INVALID_JWT),
    AuthDecision.REJECT_MALFORMED: ("Invalid token", ErrorCode.UNAUTHORIZED),
    AuthDecision.REJECT_INVALID: ("Invalid or expired token", ErrorCode.INVALID_JWT),
}


def extract_token(authorization: Optional[str]) -> tuple[Optional[str], bool]:
    """
    Split an Authorization header into its token.

    Returns:
        Tuple of (token, header_present). The token is None when the header
        is absent or malformed.
    """
    normalized = _WHITESPACE.sub(" ", authorization or "").strip()
    if not normalized:
        return None, False

    parts = normalized.split(" ")  # Bearer <JWT>
    if len(parts) != 2 or not parts[1]:
        return None, True

    return parts[1], True


def evaluate_auth(
    authorization: Optional[str],
    admin_count: int,
    jwt_secret: Optional[str],
    jwt_algorithm: str = "HS256",
) -> AuthResult:
    """
    Decide how to treat a request's credentials.

    Args:
        authorization: Raw Authorization header value, if any
        admin_count: Number of administrator rows
        jwt_secret: Shared signing secret
        jwt_algorithm: JWT signing algorithm

    Returns:
        AuthResult describing the decision and, on success, the identity

    Raises:
        InternalServerError: if no signing secret is configured
    """
    if admin_count == 0:
        return AuthResult(AuthDecision.ALLOW_BOOTSTRAP)

    token, header_present = extract_token(authorization)
    if not header_present:
        return AuthResult(AuthDecision.REJECT_MISSING)
    if not token:
        return AuthResult(AuthDecision.REJECT_MALFORMED)

    if not jwt_secret:
        logger.error("JWT_SECRET_KEY is not configured")
        raise InternalServerError("Internal server error")

    try:
        payload = verify_jwt_token(token, jwt_secret, jwt_algorithm)
    except jwt.ExpiredSignatureError:
        return AuthResult(AuthDecision.REJECT_INVALID, reason="Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        return AuthResult(AuthDecision.REJECT_INVALID, reason=str(e))

    return AuthResult(AuthDecision.ALLOW_IDENTITY, identity=AdminIdentity.from_payload(payload))


def rejection_error(result: AuthResult) -> UnauthorizedError:
    """Build the 401 error for a rejected AuthResult."""
    message, code = REJECTION_RESPONSES[result.decision]
    return UnauthorizedError(message, code=code)

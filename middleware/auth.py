from dataclasses import dataclass

from fastapi import Request, HTTPException, status
from utils.jwt import verify_jwt
from utils.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """Caller resolved from a valid session token"""

    user_id: int
    email: str


def _identity_from_claims(payload: dict):
    try:
        return Identity(user_id=int(payload["sub"]), email=payload.get("email", ""))
    except (KeyError, TypeError, ValueError):
        return None


async def verify_jwt_middleware(request: Request) -> Identity:
    """
    Middleware to verify JWT token in Authorization header

    Args:
        request: FastAPI request object

    Returns:
        Identity of the caller, also attached to request.state

    Raises:
        HTTPException: 401 if the bearer token is missing, 403 if it is
            invalid or expired
    """
    auth_header = request.headers.get("Authorization")
    parts = auth_header.split() if auth_header else []

    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_jwt(parts[1])
    identity = _identity_from_claims(payload) if payload else None

    if identity is None:
        logger.warning("Rejected token on %s %s", request.method, request.url.path)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token"
        )

    # Attach user info to request state
    request.state.user_id = identity.user_id
    request.state.user_email = identity.email
    return identity

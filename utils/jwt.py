import jwt
import os
from datetime import datetime, timedelta, timezone
from typing import Optional
from dotenv import load_dotenv

from utils.log import get_logger

# Load environment variables
load_dotenv()

logger = get_logger(__name__)

SECRET_KEY = os.getenv("JWT_SECRET")
ALGORITHM = "HS256"
TOKEN_TTL = timedelta(hours=8)

if not SECRET_KEY:
    raise ValueError("JWT_SECRET environment variable is not set")


def create_jwt(user_id: int, email: str, *, now: Optional[datetime] = None) -> str:
    """
    Issue a signed token for a user

    Args:
        user_id: Subject of the token
        email: User email carried as a claim
        now: Issuance time, defaults to the current UTC time

    Returns:
        Encoded JWT expiring 8 hours after issuance
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + TOKEN_TTL,
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify JWT token and return payload

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        return jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected invalid token: %s", type(exc).__name__)
        return None


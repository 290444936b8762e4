from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database import get_session
from schemas import LoginRequest, LoginResponse, UserPublic
from store import get_user_by_email
from utils.jwt import create_jwt
from utils.log import get_logger
from utils.passwords import verify_password

router = APIRouter()
logger = get_logger(__name__)


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, session: Session = Depends(get_session)) -> LoginResponse:
    """
    Exchange email and password for a session token

    Returns:
        Token valid for 8 hours plus the public user profile
    """
    user = get_user_by_email(session, credentials.email)

    if user is None:
        logger.info("Login failed: unknown user %s", credentials.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    if not verify_password(credentials.password, user.password):
        logger.info("Login failed: wrong password for %s", credentials.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect password"
        )

    return LoginResponse(
        token=create_jwt(user.id, user.email),
        user=UserPublic.model_validate(user),
    )

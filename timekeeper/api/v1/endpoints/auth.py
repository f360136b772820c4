"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from timekeeper.db.database import get_db
from timekeeper.db.models import UserModel
from timekeeper.models.auth_schemas import Token, UserLogin, UserRegister, UserResponse
from timekeeper.models.schemas import DataResponse
from timekeeper.repositories import profile_repository, user_repository
from timekeeper.services.auth_service import (
    authenticate_user,
    create_access_token,
    get_password_hash,
    verify_token,
)
from timekeeper.utils import get_logger, to_iso

logger = get_logger(__name__)

router = APIRouter()

# auto_error=False: a missing header must answer 401, not FastAPI's default
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Session = Depends(get_db),
) -> UserModel:
    """Get current authenticated user from JWT token."""
    if credentials is None:
        raise _unauthorized("Unauthorized: no signed-in user.")

    user_id = verify_token(credentials.credentials)
    if not user_id:
        raise _unauthorized("Unauthorized: could not validate credentials.")

    user = user_repository.get_by_id(db, user_id)
    if not user:
        raise _unauthorized("Unauthorized: user not found.")

    return user


def _user_response(user: UserModel) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        displayName=user.display_name,
        createdAt=to_iso(user.created_at),
    )


@router.post("/register", response_model=DataResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def register(body: UserRegister, db: Session = Depends(get_db)):
    """Register a new user and create their profile."""
    logger.info(f"POST /auth/register: email={body.email}")

    if user_repository.get_by_email(db, body.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    user = user_repository.create_user(
        db,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        display_name=body.displayName,
    )
    profile_repository.upsert(db, user.id, {"email": user.email, "display_name": user.display_name})

    logger.info(f"New user registered: {user.email}")
    return DataResponse(data=_user_response(user))


@router.post("/login", response_model=DataResponse[Token])
async def login(body: UserLogin, db: Session = Depends(get_db)):
    """Login user and return JWT token."""
    logger.info(f"POST /auth/login: email={body.email}")

    user = authenticate_user(db, body.email, body.password)
    if not user:
        raise _unauthorized("Incorrect email or password")

    access_token = create_access_token(data={"sub": user.id})
    logger.info(f"User logged in: {user.email}")
    return DataResponse(data=Token(accessToken=access_token, tokenType="bearer", userId=user.id))


@router.get("/me", response_model=DataResponse[UserResponse])
async def get_me(current_user: UserModel = Depends(get_current_user)):
    """Get current user information."""
    logger.info(f"GET /auth/me: user_id={current_user.id}")
    return DataResponse(data=_user_response(current_user))

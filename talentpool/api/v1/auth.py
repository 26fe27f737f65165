"""Authentication endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from talentpool.config import settings
from talentpool.core.security import (
    REFRESH_TOKEN,
    RESET_TOKEN,
    create_access_token,
    create_password_reset_token,
    create_refresh_token,
    decode_token,
    get_current_user,
    get_password_hash,
    subject_id,
    verify_password,
)
from talentpool.db.session import get_db
from talentpool.models.user import User
from talentpool.repositories.user_repository import UserRepository
from talentpool.schemas.auth import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    TokenResponse,
    UserResponse,
)
from talentpool.schemas.job_offer import MessageResponse

logger = structlog.get_logger(__name__)

router = APIRouter()

RESET_LINK_SENT = "If the email exists, a password reset link has been sent."
INVALID_RESET_TOKEN = "This password reset token is invalid."


def _tokens_for(user: User) -> dict:
    return {
        "access_token": create_access_token({"sub": str(user.id)}),
        "refresh_token": create_refresh_token({"sub": str(user.id)}),
        "token_type": "bearer",
    }


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new candidate or recruiter."""
    users = UserRepository(db)

    # Check if user already exists
    if await users.find_by_email(request.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    new_user = await users.create(
        {
            "name": request.name,
            "email": request.email.lower(),
            "password_hash": get_password_hash(request.password),
            "role": request.role,
        }
    )
    await db.commit()
    logger.info("user_registered", user_id=new_user.id, role=new_user.role)

    return RegisterResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(new_user),
        **_tokens_for(new_user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email and password."""
    user = await UserRepository(db).find_by_email(request.email)

    if not user or not verify_password(request.password, user.password_hash):
        logger.info("login_failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    logger.info("user_logged_in", user_id=user.id)
    return LoginResponse(user=UserResponse.model_validate(user), **_tokens_for(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards them."""
    logger.info("user_logged_out", user_id=current_user.id)
    return MessageResponse(message="Successfully logged out")


@router.post("/refresh", response_model=TokenResponse)
async def refresh(request: RefreshRequest, db: AsyncSession = Depends(get_db)):
    """Exchange a refresh token for a new token pair."""
    payload = decode_token(request.refresh_token, expected_type=REFRESH_TOKEN)
    user_id = subject_id(payload)
    user = await UserRepository(db).find(user_id) if user_id is not None else None

    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return TokenResponse(**_tokens_for(user))


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(request: ForgotPasswordRequest, db: AsyncSession = Depends(get_db)):
    """
    Issue a password reset token.

    The answer never reveals whether the email is registered. The token is
    only echoed back in DEBUG; delivering it by email is left to deployment.
    """
    user = await UserRepository(db).find_by_email(request.email)
    if user is None or not user.is_active:
        return ForgotPasswordResponse(message=RESET_LINK_SENT)

    token = create_password_reset_token(user)
    logger.info("password_reset_requested", user_id=user.id)
    return ForgotPasswordResponse(
        message=RESET_LINK_SENT,
        reset_token=token if settings.DEBUG else None,
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    """Set a new password using a reset token; the token dies with the old password."""
    try:
        payload = decode_token(request.token, expected_type=RESET_TOKEN)
    except HTTPException:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_RESET_TOKEN)

    users = UserRepository(db)
    user_id = subject_id(payload)
    user = await users.find(user_id) if user_id is not None else None
    if user is None or payload.get("pwd") != user.password_hash[-12:]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_RESET_TOKEN)

    await users.set_password_hash(user, get_password_hash(request.password))
    await db.commit()
    logger.info("password_reset_completed", user_id=user.id)
    return MessageResponse(message="Your password has been reset.")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info."""
    return UserResponse.model_validate(current_user)


# Mounted without the /auth prefix
user_router = APIRouter()


@user_router.get("/user", response_model=UserResponse)
async def get_user(current_user: User = Depends(get_current_user)):
    """Get current user info."""
    return UserResponse.model_validate(current_user)

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import settings
from app.core.auth.service import AuthService
from app.core.auth.schemas import (
    UserRegister, UserLogin, RefreshTokenRequest,
    TokenResponse, UserResponse, UserProfileResponse
)
from app.core.auth.dependencies import get_current_user, ACCESS_COOKIE, REFRESH_COOKIE
from app.core.exceptions import ConflictError, UnauthorizedError
from app.shared.database.models import User

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_auth_cookies(response: Response, access_token: str, refresh_token: Optional[str] = None) -> None:
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=access_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        max_age=settings.access_token_expire_minutes * 60
    )
    if refresh_token:
        response.set_cookie(
            key=REFRESH_COOKIE,
            value=refresh_token,
            httponly=True,
            secure=settings.cookie_secure,
            samesite="strict",
            max_age=settings.refresh_token_expire_days * 24 * 60 * 60
        )


def _token_data(user: User) -> dict:
    return {"user_id": user.id, "email": user.email}


@router.post("/register", response_model=UserProfileResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """
    Registrar un nuevo usuario (tenant)

    **Body:**
    ```json
        {
            "name": "Ana Pérez",
            "email": "ana@example.com",
            "password": "secret123"
        }
    ```
    """
    email = user_data.email.lower()

    if db.query(User).filter(User.email == email).first():
        raise ConflictError("User already exists.")

    user = User(
        name=user_data.name,
        email=email,
        password_hash=AuthService.get_password_hash(user_data.password)
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User already exists.")
    db.refresh(user)

    logger.info(f"Usuario registrado: {user.id} ({user.email})")

    return UserProfileResponse(
        success=True,
        message="User registered successfully.",
        user=UserResponse.model_validate(user)
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    user_login: UserLogin,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Login con email y contraseña

    Devuelve los tokens en el body y también como cookies httpOnly
    (`accessToken`, `refreshToken`).
    """
    user = db.query(User).filter(User.email == user_login.email.lower()).first()

    if not user or not AuthService.verify_password(user_login.password, user.password_hash):
        raise UnauthorizedError("Invalid email or password.")

    access_token = AuthService.create_access_token(data=_token_data(user))
    refresh_token = AuthService.create_refresh_token(data=_token_data(user))
    _set_auth_cookies(response, access_token, refresh_token)

    return TokenResponse(
        success=True,
        message="Login successful.",
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )


@router.post("/refresh-token", response_model=TokenResponse)
async def refresh_token(
    request: Request,
    response: Response,
    payload: Optional[RefreshTokenRequest] = None,
    db: Session = Depends(get_db)
):
    """Nuevo token de acceso a partir del token de refresco (body o cookie)"""
    token = (payload.refresh_token if payload else None) or request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise UnauthorizedError("Refresh token is required.")

    data = AuthService.verify_refresh_token(token)
    if data is None:
        raise UnauthorizedError("Invalid or expired refresh token.")

    user = db.query(User).filter(User.id == data.get("user_id")).first()
    if user is None:
        raise UnauthorizedError("User not found")

    access_token = AuthService.create_access_token(data=_token_data(user))
    _set_auth_cookies(response, access_token)

    return TokenResponse(
        success=True,
        message="Token refreshed successfully.",
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )


@router.post("/logout")
async def logout(response: Response):
    """Logout: elimina las cookies de sesión (los tokens son stateless)"""
    response.delete_cookie(ACCESS_COOKIE)
    response.delete_cookie(REFRESH_COOKIE)
    return {"success": True, "message": "Logged out successfully."}


@router.get("/me", response_model=UserProfileResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """
    Obtener información del usuario actual
    **Headers requeridos:**
    - Authorization: Bearer {token} (o cookie `accessToken`)
    """
    return UserProfileResponse(
        success=True,
        message="User profile fetched successfully.",
        user=UserResponse.model_validate(current_user)
    )

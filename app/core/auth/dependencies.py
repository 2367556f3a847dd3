from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from typing import Optional

from app.config.database import get_db
from app.core.auth.schemas import TokenPayload
from app.core.auth.service import AuthService
from app.core.exceptions import UnauthorizedError
from app.shared.database.models import User

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

security = HTTPBearer(auto_error=False)


def get_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """Token desde `Authorization: Bearer`, o desde la cookie si no hay header"""
    if credentials and credentials.credentials:
        return credentials.credentials

    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        raise UnauthorizedError("Unauthorized")
    return token


async def get_current_user(
    token: str = Depends(get_access_token),
    db: Session = Depends(get_db)
) -> User:
    """Obtener usuario actual desde el token"""

    payload = AuthService.verify_token(token)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")

    try:
        token_data = TokenPayload(**payload)
    except PydanticValidationError:
        raise UnauthorizedError("Invalid token payload")

    user = db.query(User).filter(User.id == token_data.user_id).first()
    if user is None:
        raise UnauthorizedError("User not found")

    return user


async def get_current_owner_id(current_user: User = Depends(get_current_user)) -> int:
    """Id del tenant con el que se filtran todas las consultas"""
    return current_user.id

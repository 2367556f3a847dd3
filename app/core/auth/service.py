from datetime import datetime, timedelta
from typing import Optional
from jose import jwt, JWTError
from passlib.context import CryptContext
import logging

from app.config.settings import settings

logger = logging.getLogger(__name__)

# Password context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class AuthService:
    """Servicio de autenticación"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verificar contraseña"""
        try:
            # bcrypt solo considera los primeros 72 bytes
            encoded_password = plain_password.encode('utf-8')[:72].decode('utf-8', 'ignore')
            return pwd_context.verify(encoded_password, hashed_password)
        except (ValueError, TypeError) as e:
            logger.warning(f"Password verification error: {str(e)}")
            return False

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Generar hash de contraseña"""
        encoded_password = password.encode('utf-8')[:72].decode('utf-8', 'ignore')
        return pwd_context.hash(encoded_password)

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Crear token de acceso"""
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
        return AuthService._encode(data, ACCESS_TOKEN, expires_delta, settings.secret_key)

    @staticmethod
    def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Crear token de refresco (firmado con su propio secreto)"""
        if expires_delta is None:
            expires_delta = timedelta(days=settings.refresh_token_expire_days)
        return AuthService._encode(data, REFRESH_TOKEN, expires_delta, settings.refresh_secret_key)

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """Verificar y decodificar token de acceso"""
        return AuthService._decode(token, ACCESS_TOKEN, settings.secret_key)

    @staticmethod
    def verify_refresh_token(token: str) -> Optional[dict]:
        """Verificar y decodificar token de refresco"""
        return AuthService._decode(token, REFRESH_TOKEN, settings.refresh_secret_key)

    @staticmethod
    def _encode(data: dict, token_type: str, expires_delta: timedelta, secret: str) -> str:
        to_encode = data.copy()

        if "user_id" not in to_encode:
            raise ValueError("user_id es requerido en el token")

        to_encode.update({
            "exp": datetime.utcnow() + expires_delta,
            "type": token_type
        })
        return jwt.encode(to_encode, secret, algorithm=settings.algorithm)

    @staticmethod
    def _decode(token: str, token_type: str, secret: str) -> Optional[dict]:
        try:
            payload = jwt.decode(token, secret, algorithms=[settings.algorithm])
        except JWTError:
            return None
        if payload.get("type") != token_type:
            return None
        return payload

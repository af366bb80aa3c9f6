from datetime import datetime, timedelta
from typing import Optional
import logging

from jose import jwt, JWTError
from passlib.context import CryptContext
from warehub.config.settings import settings

logger = logging.getLogger(__name__)

# Password context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

class AuthService:
    """Credential issuer: password hashing and JWT bearer tokens"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Check a password against its bcrypt hash"""
        try:
            # bcrypt only looks at the first 72 bytes
            encoded_password = plain_password.encode('utf-8')[:72].decode('utf-8', 'ignore')
            return pwd_context.verify(encoded_password, hashed_password)
        except Exception as e:
            logger.warning(f"Password verification error: {str(e)}")
            return False

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password"""
        encoded_password = password.encode('utf-8')[:72].decode('utf-8', 'ignore')
        return pwd_context.hash(encoded_password)

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed access token"""
        to_encode = data.copy()

        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)

        to_encode.update({"exp": expire})

        if "user_id" not in to_encode:
            raise ValueError("user_id is required in the token")

        encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

        return encoded_jwt

    @staticmethod
    def create_token_for_user(user) -> str:
        # `sub` must be a string for JWT consumers that validate it
        return AuthService.create_access_token({
            "user_id": user.id,
            "sub": str(user.id),
            "roles": list(user.roles or []),
        })

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """Verify and decode a token; None when invalid or expired"""
        try:
            payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
            return payload
        except JWTError:
            return None

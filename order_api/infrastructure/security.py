import uuid
from datetime import datetime, timedelta, timezone
from jose import jwt
from passlib.context import CryptContext

from order_api.config import Settings
from order_api.domain.models import User
from order_api.application.interfaces import PasswordHasher, TokenService


class PasslibPasswordHasher(PasswordHasher):
    def __init__(self):
        self._context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self._context.verify(password, password_hash)


class JWTTokenService(TokenService):
    def __init__(self, settings: Settings):
        self._settings = settings

    def create_access_token(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": user.id,
            "jti": str(uuid.uuid4()),
            "email": user.email,
            "role": user.role.value,
            "iss": self._settings.JWT_ISSUER,
            "aud": self._settings.JWT_AUDIENCE,
            "iat": now,
            "exp": now + timedelta(minutes=self._settings.JWT_EXPIRE_MINUTES),
        }
        return jwt.encode(claims, self._settings.JWT_SECRET_KEY, algorithm=self._settings.JWT_ALGORITHM)

    def decode(self, token: str) -> dict:
        """Raises jose.JWTError (ExpiredSignatureError included) on a bad token"""
        return jwt.decode(
            token,
            self._settings.JWT_SECRET_KEY,
            algorithms=[self._settings.JWT_ALGORITHM],
            audience=self._settings.JWT_AUDIENCE,
            issuer=self._settings.JWT_ISSUER,
        )

import logging
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, ExpiredSignatureError

from order_api.config import Settings
from order_api.domain.models import UserRole
from order_api.infrastructure.unit_of_work import SQLAlchemyUnitOfWork
from order_api.infrastructure.security import JWTTokenService, PasslibPasswordHasher

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser:
    def __init__(self, user_id: str, email: str, role: str):
        self.id = user_id
        self.email = email
        self.role = role


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_unit_of_work(request: Request) -> SQLAlchemyUnitOfWork:
    return SQLAlchemyUnitOfWork(request.app.state.session_factory)


def get_token_service(settings: Settings = Depends(get_settings)) -> JWTTokenService:
    return JWTTokenService(settings)


def get_password_hasher() -> PasslibPasswordHasher:
    return PasslibPasswordHasher()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    tokens: JWTTokenService = Depends(get_token_service),
) -> CurrentUser:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        payload = tokens.decode(credentials.credentials)
    except ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    sub = payload.get("sub")
    if sub is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return CurrentUser(user_id=sub, email=payload.get("email", ""), role=payload.get("role", "user"))


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.role != UserRole.ADMIN.value:
        logger.warning(f"User {user.email} denied an admin-only operation")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
    return user

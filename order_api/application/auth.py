import logging
import uuid
from pydantic import BaseModel

from order_api.domain.models import User, UserRole
from order_api.domain.exceptions import EmailAlreadyRegisteredError, InvalidCredentialsError
from order_api.application.interfaces import PasswordHasher, TokenService


logger = logging.getLogger(__name__)


class CredentialsDTO(BaseModel):
    email: str
    password: str


class RegisterUserUseCase:
    def __init__(self, unit_of_work, password_hasher: PasswordHasher):
        self._uow = unit_of_work
        self._hasher = password_hasher

    async def __call__(self, credentials: CredentialsDTO) -> User:
        email = credentials.email.lower()
        async with self._uow() as uow:
            if await uow.users.get_by_email(email):
                logger.warning(f"User registration failed for {email}: already registered")
                raise EmailAlreadyRegisteredError(email)

            user = User(
                id=str(uuid.uuid4()),
                email=email,
                password_hash=self._hasher.hash(credentials.password),
                role=UserRole.USER,
            )
            await uow.users.create(user)
            await uow.commit()

        logger.info(f"User {email} registered")
        return user


class LoginUseCase:
    def __init__(self, unit_of_work, password_hasher: PasswordHasher, token_service: TokenService):
        self._uow = unit_of_work
        self._hasher = password_hasher
        self._tokens = token_service

    async def __call__(self, credentials: CredentialsDTO) -> str:
        email = credentials.email.lower()
        async with self._uow() as uow:
            user = await uow.users.get_by_email(email)

        if not user or not self._hasher.verify(credentials.password, user.password_hash):
            logger.warning(f"Invalid login attempt for {email}")
            raise InvalidCredentialsError()

        logger.info(f"User {email} logged in")
        return self._tokens.create_access_token(user)

from fastapi import APIRouter, Depends, status

from order_api.presentation.dependencies import get_unit_of_work, get_token_service, get_password_hasher
from order_api.presentation.schemas import RegisterRequest, CredentialsRequest, TokenResponse, ErrorResponse
from order_api.application.auth import RegisterUserUseCase, LoginUseCase, CredentialsDTO

router = APIRouter(prefix="/auth", tags=["auth"])


def get_register_use_case(uow=Depends(get_unit_of_work), hasher=Depends(get_password_hasher)):
    return RegisterUserUseCase(uow, hasher)


def get_login_use_case(
    uow=Depends(get_unit_of_work),
    hasher=Depends(get_password_hasher),
    tokens=Depends(get_token_service),
):
    return LoginUseCase(uow, hasher, tokens)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    use_case: RegisterUserUseCase = Depends(get_register_use_case)
):
    user = await use_case(CredentialsDTO(email=request.email, password=request.password))
    return {"message": "User registered successfully.", "user_id": user.id}


@router.post("/login", response_model=TokenResponse, responses={400: {"model": ErrorResponse}})
async def login(
    request: CredentialsRequest,
    use_case: LoginUseCase = Depends(get_login_use_case)
):
    token = await use_case(CredentialsDTO(email=request.email, password=request.password))
    return TokenResponse(access_token=token, user=request.email.lower())

"""
Registration and login endpoints.

Both read the device from the ``Device-Id`` header, the same
way the account routes do.
"""

from fastapi import APIRouter, Depends

from savings_ledger.api.deps import get_auth_service, get_device_id
from savings_ledger.api.errors import to_http
from savings_ledger.errors import LedgerError
from savings_ledger.schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    LoginResponse,
    UserResponse,
)
from savings_ledger.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    request: RegisterRequest,
    device_id: str = Depends(get_device_id),
    service: AuthService = Depends(get_auth_service),
):
    """
    Register a new customer.

    The device used to register starts in PENDING status and
    must be approved before the customer can log in from it.
    """
    try:
        user = service.register(
            email=request.email,
            full_name=request.full_name,
            password=request.password,
            device_identifier=device_id,
        )
    except LedgerError as e:
        raise to_http(e)
    return RegisterResponse(user_id=user.id)


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    device_id: str = Depends(get_device_id),
    service: AuthService = Depends(get_auth_service),
):
    """Exchange credentials and a verified device for a session token."""
    try:
        result = service.login(
            email=request.email,
            password=request.password,
            device_identifier=device_id,
        )
    except LedgerError as e:
        raise to_http(e)
    return LoginResponse(
        token=result.token,
        user=UserResponse.model_validate(result.user),
    )

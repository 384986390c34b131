"""
FastAPI dependencies.

Services are built per request from the process-wide storage
handle and the configured hasher and token signer. Tests swap
any of these through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import sessionmaker

from savings_ledger.api.errors import to_http
from savings_ledger.config import get_settings
from savings_ledger.errors import LedgerError, Unauthenticated
from savings_ledger.models.base import get_session_factory
from savings_ledger.models.enums import UserRole
from savings_ledger.services.auth_service import AuthService
from savings_ledger.services.device_gate import DeviceGate
from savings_ledger.services.device_service import DeviceService
from savings_ledger.services.ledger_service import LedgerService
from savings_ledger.services.password_hasher import PasswordHasher
from savings_ledger.services.token_service import SessionClaims, TokenService

bearer = HTTPBearer(auto_error=False)

MAX_DEVICE_ID_LENGTH = 255


@lru_cache()
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(get_settings().PASSWORD_SECRET)


@lru_cache()
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        ttl_hours=settings.SESSION_TTL_HOURS,
    )


def get_device_gate(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> DeviceGate:
    return DeviceGate(session_factory)


def get_auth_service(
    session_factory: sessionmaker = Depends(get_session_factory),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
    device_gate: DeviceGate = Depends(get_device_gate),
) -> AuthService:
    return AuthService(session_factory, hasher, tokens, device_gate)


def get_ledger_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> LedgerService:
    return LedgerService(
        session_factory, max_retries=get_settings().LEDGER_MAX_RETRIES
    )


def get_device_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> DeviceService:
    return DeviceService(session_factory)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    tokens: TokenService = Depends(get_token_service),
) -> SessionClaims:
    """Decode the bearer token. Never touches the database."""
    if credentials is None:
        raise to_http(Unauthenticated("Access token required"))
    try:
        return tokens.verify(credentials.credentials)
    except LedgerError as e:
        raise to_http(e)


def get_device_id(device_id: str | None = Header(default=None)) -> str:
    """Read the ``Device-Id`` request header."""
    if not device_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Device ID required",
        )
    # Same bound as the devices.device_identifier column
    if len(device_id) > MAX_DEVICE_ID_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Device ID too long",
        )
    return device_id


def require_verified_device(
    claims: SessionClaims = Depends(get_current_user),
    device_id: str = Depends(get_device_id),
    device_gate: DeviceGate = Depends(get_device_gate),
) -> SessionClaims:
    """
    Re-check the device on every call.

    Verification is not cached from login time: a device
    status change takes effect on the next request.
    """
    try:
        device_gate.require_verified(claims.user_id, device_id)
    except LedgerError as e:
        raise to_http(e)
    return claims


def require_admin(
    claims: SessionClaims = Depends(get_current_user),
) -> SessionClaims:
    if claims.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return claims

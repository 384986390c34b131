"""
Translation of domain errors into HTTP errors.

Services raise LedgerError subclasses and know nothing about
HTTP. Routers turn them into HTTPExceptions with this table.
"""

from fastapi import HTTPException, status

from savings_ledger.errors import ErrorKind, LedgerError

STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.DEVICE_NOT_VERIFIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INSUFFICIENT_FUNDS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_TRANSITION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http(exc: LedgerError) -> HTTPException:
    headers = None
    if exc.kind == ErrorKind.UNAUTHENTICATED:
        headers = {"WWW-Authenticate": "Bearer"}
    elif exc.retryable:
        headers = {"Retry-After": "1"}
    return HTTPException(
        status_code=STATUS_CODES[exc.kind],
        detail={"error": exc.kind.value, "message": exc.message},
        headers=headers,
    )

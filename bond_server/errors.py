"""
Error taxonomy for the bond API and the uniform response envelope.

Every failure leaves the service as `{"error": true, "msg": ...}` plus the
operation-specific null fields (`bond`, `bonds`, `count`) carried on the error.
Nothing here retries; an error ends the request.
"""
import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BondError(Exception):
    """Base class. Subclasses pin the HTTP status the request ends with."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, msg: Any, **extra: Any):
        super().__init__(msg if isinstance(msg, str) else repr(msg))
        self.msg = msg
        self.extra = extra


class MalformedRequestError(BondError):
    """Body could not be decoded into a bond."""

    status_code = status.HTTP_400_BAD_REQUEST


class MalformedIdError(BondError):
    """Path identifier is not a UUID. Kept at 500 to match the public API's history."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class AuthenticationError(BondError):
    """Missing, malformed or unverifiable bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class TokenExpiredError(AuthenticationError):
    pass


class PermissionDeniedError(BondError):
    """Missing credential, or caller is not the bond's creator."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(BondError):
    status_code = status.HTTP_404_NOT_FOUND


class BondValidationError(BondError):
    """Field constraint violations; msg is a {field: message} mapping."""

    status_code = status.HTTP_400_BAD_REQUEST


class StoreError(BondError):
    """Backend unreachable, constraint violation, or undecodable row."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def envelope(msg: Any = None, *, error: bool = False, **fields: Any) -> dict:
    """Build the `{error, msg, ...}` body shared by every response."""
    return {"error": error, "msg": msg, **fields}


async def bond_error_handler(request: Request, exc: BondError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(exc.msg, error=True, **exc.extra),
        headers=headers,
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BondError, bond_error_handler)

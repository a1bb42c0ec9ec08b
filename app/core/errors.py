"""
Error taxonomy and handlers following FastAPI best practices
"""

import traceback
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core.config import config
from app.core.logger import logger


def describe_error(error: Exception) -> Dict[str, str]:
    """Raw detail of an underlying failure, surfaced as-is to clients"""
    return {"type": type(error).__name__, "message": str(error)}


class ErrorResponse(Exception):
    """Custom exception for application errors"""

    code = "ERROR"

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers
        super().__init__(message)


class Unauthenticated(ErrorResponse):
    """No credential, or no token segment in the authorization header"""

    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Unauthorized: No token provided"):
        super().__init__(
            message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(ErrorResponse):
    """Credential present but rejected by the identity provider"""

    code = "FORBIDDEN"

    def __init__(self, message: str = "Invalid token", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN, details=details)


class AccessDenied(ErrorResponse):
    """Verified principal lacking the required role"""

    code = "ACCESS_DENIED"

    def __init__(self, message: str = "Access denied: Admins only"):
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class StoreUnavailable(ErrorResponse):
    """Persistence-layer failure"""

    code = "STORE_UNAVAILABLE"

    def __init__(self, message: str, error: Optional[Exception] = None):
        super().__init__(
            message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=describe_error(error) if error else None,
        )


class IdentityProviderUnavailable(ErrorResponse):
    """Identity provider unreachable, timed out or failing"""

    code = "IDENTITY_PROVIDER_UNAVAILABLE"

    def __init__(self, message: str = "Identity provider unavailable", error: Optional[Exception] = None):
        super().__init__(
            message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=describe_error(error) if error else None,
        )


class InvalidCredential(Exception):
    """
    Raised by identity providers when a token is missing, malformed, expired
    or fails verification. Never reaches clients directly: the authorization
    pipeline translates it to Forbidden.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ErrorResponseModel(BaseModel):
    """Pydantic model for error responses"""
    success: bool = False
    message: str
    code: str
    error: Optional[Dict[str, Any]] = None


def error_body(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    content = {"success": False, "message": message, "code": code}
    if details:
        content["error"] = details
    return content


async def error_response_handler(request: Request, exc: ErrorResponse):
    """Handler for ErrorResponse exceptions"""
    metadata = {
        "event": "error_response",
        "code": exc.code,
        "status_code": exc.status_code,
        "url": str(request.url),
        "method": request.method,
        **exc.details,
    }

    if exc.status_code >= 500:
        if config.environment == "development":
            metadata["traceback"] = traceback.format_exc()
        logger.error(f"Error: {exc.message}", metadata=metadata)
    else:
        logger.warning(f"Request rejected: {exc.message}", metadata=metadata)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message, exc.details),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handler for FastAPI HTTPException"""
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={
            "event": "http_exception",
            "status_code": exc.status_code,
            "url": str(request.url),
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTP_ERROR", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handler for malformed request bodies and parameters"""
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        "Validation error",
        metadata={"event": "validation_error", "errors": errors},
    )
    return JSONResponse(
        status_code=422,
        content={**error_body("VALIDATION_ERROR", "Validation error"), "details": errors},
    )

"""
Shared error handling for the Account Token Service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from .logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class AccountLayerException(Exception):
    """Base exception for account services."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(AccountLayerException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class TokenValidationError(ValidationError):
    """Field set or key material does not fit the requested token variant."""


class TokenFormatError(AccountLayerException):
    """Wire bytes are malformed: too short, misaligned, or unpaddable."""

    def __init__(self, message: str = "Malformed token", details: Optional[Dict[str, Any]] = None):
        super().__init__("TOKEN_FORMAT_ERROR", message, details)


class TokenIntegrityError(AccountLayerException):
    """Token decrypted but its signature does not match."""

    def __init__(self, message: str = "Token signature did not match", details: Optional[Dict[str, Any]] = None):
        super().__init__("TOKEN_INTEGRITY_ERROR", message, details)


class KeyProviderError(AccountLayerException):
    """Key source errors."""

    def __init__(self, service: str, message: str = "Key provider error", details: Optional[Dict[str, Any]] = None):
        self.service = service
        super().__init__("KEY_PROVIDER_ERROR", f"{service}: {message}", details)


class KeyNotFoundError(KeyProviderError):
    """Requested key does not exist for the service."""

    def __init__(self, service: str, key: str, details: Optional[Dict[str, Any]] = None):
        self.key = key
        super().__init__(service, f"key '{key}' not found", details)
        self.code = "KEY_NOT_FOUND"

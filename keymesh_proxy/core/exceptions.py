"""
Custom exceptions for the Keymesh OAuth proxy.
Provides structured error handling for verification, prekey and account operations.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class ProxyException(Exception):
    """Base exception for the proxy application."""

    def __init__(
        self,
        message: str,
        error_code: str = "PROXY_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# Validation
class ValidationError(ProxyException):
    """Raised when a required parameter is missing or malformed."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


# Signature & Keys
class InvalidKeyEncodingError(ProxyException):
    """Raised when a public key is not valid hex or has the wrong length."""

    def __init__(self, public_key: str, details: Optional[Dict[str, Any]] = None):
        message = f"Invalid public key encoding: {public_key}"
        super().__init__(message, "INVALID_KEY_ENCODING", details)


class InvalidSignatureError(ProxyException):
    """Raised when a signature is malformed or does not verify."""

    def __init__(self, message: str = "invalid signature", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_SIGNATURE", details)


# OAuth
class OAuthError(ProxyException):
    """Raised when the OAuth handshake with the social platform fails."""

    def __init__(self, message: str = "get user info error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "OAUTH_ERROR", details)


# Social proof lookup
class LookupUnavailableError(ProxyException):
    """Raised when the social proof lookup function fails or returns no claim."""

    def __init__(self, message: str = "Social proof lookup failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "LOOKUP_UNAVAILABLE", details)


class LookupTimeoutError(ProxyException):
    """Raised when the social proof lookup function times out."""

    def __init__(self, message: str = "Social proof lookup timed out", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "LOOKUP_TIMEOUT", details)


# Storage
class BlobStoreError(ProxyException):
    """Raised when the blob store rejects a write."""

    def __init__(self, message: str = "Blob store operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "BLOB_STORE_ERROR", details)


class DatabaseError(ProxyException):
    """Raised when database operations fail."""

    def __init__(self, message: str = "Database operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATABASE_ERROR", details)


class CacheError(ProxyException):
    """Raised when cache operations fail."""

    def __init__(self, message: str = "Cache operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CACHE_ERROR", details)


def create_http_exception(
    exc: ProxyException,
    status_code: Optional[int] = None
) -> HTTPException:
    """
    Convert a ProxyException to an HTTPException.

    Args:
        exc: ProxyException instance
        status_code: HTTP status code, derived from the error code when omitted

    Returns:
        HTTPException: FastAPI HTTP exception
    """
    return HTTPException(
        status_code=status_code or get_exception_status_code(exc),
        detail={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details
        }
    )


def get_exception_status_code(exc: ProxyException) -> int:
    """
    Get the appropriate HTTP status code for a ProxyException.

    Args:
        exc: ProxyException instance

    Returns:
        int: HTTP status code
    """
    status_mapping = {
        "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
        "INVALID_KEY_ENCODING": status.HTTP_400_BAD_REQUEST,
        "INVALID_SIGNATURE": status.HTTP_400_BAD_REQUEST,
        "OAUTH_ERROR": status.HTTP_401_UNAUTHORIZED,
        "LOOKUP_UNAVAILABLE": status.HTTP_502_BAD_GATEWAY,
        "LOOKUP_TIMEOUT": status.HTTP_504_GATEWAY_TIMEOUT,
        "BLOB_STORE_ERROR": status.HTTP_502_BAD_GATEWAY,
        "DATABASE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "CACHE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    }

    return status_mapping.get(exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

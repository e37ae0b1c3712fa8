"""
Custom exception classes for the governance indexer.
Provides structured error handling across all modules.

Storage-layer failures are not wrapped here: SQLAlchemy errors reach the
caller unchanged so it can decide how to retry the block.
"""

from typing import Any, Optional, Dict


class GovIndexerException(Exception):
    """Base exception class for the governance indexer."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(GovIndexerException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIGURATION_ERROR", details)


class DatabaseError(GovIndexerException):
    """Raised when the persistence layer is used in an invalid state."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATABASE_ERROR", details)


class SerializationError(GovIndexerException):
    """Raised when a payload or proposal content cannot be encoded."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: str = "SERIALIZATION_ERROR"
    ):
        super().__init__(message, code, details)


class ContentDecodeError(SerializationError):
    """Raised when a stored content envelope cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: str = "CONTENT_DECODE_ERROR"
    ):
        super().__init__(message, details, code)


class UnknownContentTypeError(ContentDecodeError):
    """Raised when an envelope names a content type the registry does not know."""

    def __init__(self, type_url: str):
        super().__init__(
            f"Unknown proposal content type: {type_url}",
            {"type_url": type_url},
            "UNKNOWN_CONTENT_TYPE"
        )
        self.type_url = type_url


class UnsupportedVariantError(GovIndexerException):
    """Raised when a value's concrete kind is not handled."""

    def __init__(self, message: str, kind: str, code: str):
        super().__init__(message, code, {"kind": kind})
        self.kind = kind


class UnsupportedContentTypeError(UnsupportedVariantError):
    """Raised when proposal content is not protocol-serializable."""

    def __init__(self, kind: str):
        super().__init__(
            f"Invalid proposal content type: {kind}",
            kind,
            "UNSUPPORTED_CONTENT_TYPE"
        )


class MessageNotSupportedError(UnsupportedVariantError):
    """Raised when no address resolver recognizes a message."""

    def __init__(self, kind: str):
        super().__init__(
            f"Message type not supported: {kind}",
            kind,
            "MESSAGE_NOT_SUPPORTED"
        )


def kind_of(value: Any) -> str:
    """Qualified name of a value's concrete type, used in error details."""
    value_type = type(value)
    return f"{value_type.__module__}.{value_type.__qualname__}"

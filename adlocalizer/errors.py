"""
Exception classes for the localization pipeline.

Everything below the whole-pipeline level is recoverable: the orchestrator
catches these at the (locale, size) boundary, logs them and moves on.
"""
from typing import Any, Dict, Optional


class LocalizationError(Exception):
    """Base exception for ad localization errors."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": str(self),
            "details": self.details,
        }


class MalformedSizeId(LocalizationError, ValueError):
    """Raised when a size id is not of the form '{width}x{height}'."""

    def __init__(self, size_id: str):
        super().__init__(
            f"Malformed size id '{size_id}', expected '{{width}}x{{height}}'",
            code="MALFORMED_SIZE_ID",
            details={"size_id": size_id},
        )
        self.size_id = size_id


class NoImageProduced(LocalizationError):
    """The generation call succeeded but its response held no image."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="NO_IMAGE_PRODUCED", details=details)


class GenerationTransportError(LocalizationError):
    """Network, quota or API-level failure of the image generation backend."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="GENERATION_TRANSPORT_ERROR", details=details)


class DecodeError(LocalizationError):
    """Image bytes could not be decoded."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="DECODE_ERROR", details=details)


class RenderError(LocalizationError):
    """The resized output image could not be created or encoded."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="RENDER_ERROR", details=details)


class SourceImageError(LocalizationError):
    """The uploaded source image cannot be read at all. Fatal to the request."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="SOURCE_IMAGE_ERROR", details=details)


class ConfigurationError(LocalizationError):
    """Missing or invalid configuration / environment variables."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)

"""Custom exceptions for coverpack."""

from typing import Optional


class CoverpackError(Exception):
    """Base exception for coverpack errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(CoverpackError):
    """Exception raised for missing or malformed template configuration."""

    pass


class LayoutError(CoverpackError):
    """Exception raised during layout calculation."""

    pass


class RenderingError(CoverpackError):
    """Exception raised during document rendering."""

    pass


class FontError(CoverpackError):
    """Exception raised during font registration or lookup."""

    pass


class MediaError(CoverpackError):
    """Exception raised during image decoding."""

    pass


class CompilationError(CoverpackError):
    """Exception raised during PDF compilation."""

    pass


class MergeError(CoverpackError):
    """Exception raised while stamping or merging PDF documents."""

    pass

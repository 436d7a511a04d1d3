"""Custom exceptions for textquill."""

from typing import Optional


class TextquillError(Exception):
    """Base exception for textquill errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigError(TextquillError):
    """Exception raised for invalid options or impossible page geometry."""

    pass


class EncodingError(TextquillError):
    """Exception raised when input text cannot be converted or measured in cells."""

    pass


class ShapingFailure(TextquillError):
    """Exception raised when a text run cannot be measured."""

    pass


class FontError(ShapingFailure):
    """Exception raised during font resolution."""

    pass


class RenderingError(TextquillError):
    """Exception raised when a rendering surface fails to serialize a page."""

    pass

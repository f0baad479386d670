"""Exception hierarchy.

Only configuration loading and endpoint resolution raise. Failures while
talking to the backend are absorbed by the similarity service and turned
into the empty result.
"""

from typing import Optional


class SmltError(Exception):
    """Base exception for smlt errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class ConfigError(SmltError):
    """Raised when configuration cannot be loaded or validated."""

    pass


class ResolutionError(SmltError):
    """Raised when no backend endpoint exists for a site root and language."""

    def __init__(
        self,
        message: str,
        site_root_id: int,
        language_id: int,
        original_error: Optional[Exception] = None,
    ):
        self.site_root_id = site_root_id
        self.language_id = language_id
        super().__init__(message, original_error)

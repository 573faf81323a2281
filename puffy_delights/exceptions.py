"""
Exception types shared by the storefront layers
"""
from typing import List, Optional


class PuffyError(Exception):
    """Base class for storefront errors"""


class ConfigurationError(PuffyError):
    """Required configuration is missing or still a placeholder"""


class ValidationError(PuffyError):
    """Input rejected before reaching the data store"""

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class NotFoundError(PuffyError):
    """Requested dessert or order does not exist"""


class BackendError(PuffyError):
    """The data store rejected or failed an operation"""

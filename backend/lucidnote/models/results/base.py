"""
Base result model for service operations.
"""

from pydantic import BaseModel


class ServiceResult(BaseModel):
    """Base result for operations that report failure as a value."""
    success: bool

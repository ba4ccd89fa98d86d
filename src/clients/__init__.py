"""
Client modules for remote data access
"""

from .api import ApiClient, ApiError

__all__ = ["ApiClient", "ApiError"]

"""Security platform API client module.

This module provides:
- PlatformClient: Async v1/REST API client with retry and request limits
- Exceptions: PlatformAPIError and its status-specific subclasses
"""

from .client import PlatformClient
from .exceptions import (
    PlatformAPIError,
    PlatformAuthenticationError,
    PlatformNotFoundError,
    PlatformRateLimitError,
)

__all__ = [
    # Client
    "PlatformClient",
    # Exceptions
    "PlatformAPIError",
    "PlatformAuthenticationError",
    "PlatformNotFoundError",
    "PlatformRateLimitError",
]

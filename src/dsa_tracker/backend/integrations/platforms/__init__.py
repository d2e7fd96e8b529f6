"""
Third-party Platform Integration
================================

Read-only access to public profile data on LeetCode, Codeforces and GitHub.

### client.py
- **Key Class**: `PlatformClient`
- **Responsibilities**:
  - Own the shared `httpx.AsyncClient` (timeout, connection pool)
  - Retry idempotent reads on transport errors and 5xx answers
  - Normalise upstream payloads into `schema.platform` models

### exceptions.py
- `PlatformError` and its subclasses `PlatformUserNotFoundError`,
  `PlatformUnavailableError`
"""

from .client import (
    PlatformClient,
    normalize_leetcode,
    normalize_codeforces,
    normalize_github,
)
from .exceptions import (
    PlatformError,
    PlatformUserNotFoundError,
    PlatformUnavailableError,
)

__all__ = [
    "PlatformClient",
    "normalize_leetcode",
    "normalize_codeforces",
    "normalize_github",
    "PlatformError",
    "PlatformUserNotFoundError",
    "PlatformUnavailableError",
]

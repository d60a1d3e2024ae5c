"""Common exception classes for core package.

This module centralises shared exception definitions for the **core**
package. Storage backends, the catalog, and the HTTP/CLI surfaces raise and
catch these types rather than defining their own.

All exceptions ultimately inherit from :class:`UseCaseManagerError`, allowing
callers to catch a single base class for any manager-related failure while
still distinguishing individual error categories when needed.

Updates:
  v0.3.0 - 2026-10-18 - Add a conflict error for duplicate use case identifiers.
  v0.2.0 - 2026-08-27 - Distinguish missing remote rows from transport failures.
  v0.1.0 - 2026-08-20 - Created module.
"""

from __future__ import annotations


class UseCaseManagerError(Exception):
    """Base exception for Use Case Manager failures."""


class UseCaseNotFoundError(UseCaseManagerError):
    """Raised when a use case cannot be located in the backing store."""


class UseCaseStorageError(UseCaseManagerError):
    """Raised when interactions with persistent backends fail."""


class UseCaseConflictError(UseCaseManagerError):
    """Raised when a new use case reuses an identifier already in the catalog."""


__all__ = [
    "UseCaseConflictError",
    "UseCaseManagerError",
    "UseCaseNotFoundError",
    "UseCaseStorageError",
]

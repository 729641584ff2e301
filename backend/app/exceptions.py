"""
StarPrep Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for operational failures.
Why:   Carry a client-safe message plus a private context dict that is logged
       but never returned to the API consumer.
Who:   Created by the data-access helpers and the identity middleware.

Exception Hierarchy:
    StarPrepError (base)
    ├── DatabaseError        → 500 Internal Server Error
    └── AuthenticationError  → 401 Unauthorized

Validation failures are NOT exceptions here: handlers detect them from the
request shape and return a 4xx response straight away.

Storage failures travel back to handlers inside a StorageResult
(app.services.result) instead of unwinding the stack, so each handler can
choose the message for the phase that failed. The global handlers in
main.py only see exceptions that escaped that path.
"""

from typing import Any, Dict, Optional


class StarPrepError(Exception):
    """
    Base exception for all StarPrep application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DatabaseError(StarPrepError):
    """
    Raised (or returned inside a StorageResult) when a database operation fails.

    Security Note:
        The message returned to the client is always generic.
        The original exception type and the operation name go into context,
        which is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(StarPrepError):
    """
    Raised when a bearer token is present but cannot be verified.

    A missing token is not an error at this layer; handlers that need an
    identity report its absence themselves.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Invalid token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

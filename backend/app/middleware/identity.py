"""
StarPrep Backend — Identity Middleware
========================================

What:  Reads the caller's identity from an optional bearer token and attaches
       it to the request.
Why:   Handlers that create content need to know who the caller is, but token
       issuance and login belong to the auth service, not to this backend.
How:   If an `Authorization: Bearer <jwt>` header is present, the token is
       verified with the shared secret and its `id` (or `sub`) claim becomes
       `request.state.identity`. A bad token is rejected with 401 here. With no
       header the request continues without an identity.
Who:   Handlers receive the identity as an explicit argument through the
       `get_identity` dependency; nothing else reads request.state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import AuthenticationError
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Pre-authenticated caller context."""
    id: int


def decode_identity(token: str) -> Identity:
    """
    Verify a bearer token and extract the caller id.

    Raises:
        AuthenticationError: bad signature, expired token, or no usable id claim.
    """
    try:
        payload: Dict[str, Any] = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        raise AuthenticationError(context={"reason": type(e).__name__})

    raw_id = payload.get("id", payload.get("sub"))
    try:
        return Identity(id=int(raw_id))
    except (TypeError, ValueError):
        raise AuthenticationError(context={"reason": "missing id claim"})


class IdentityMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        header = request.headers.get("Authorization")
        if header:
            scheme, _, token = header.partition(" ")
            try:
                if scheme.lower() != "bearer" or not token:
                    raise AuthenticationError(context={"reason": "not a bearer token"})
                request.state.identity = decode_identity(token.strip())
            except AuthenticationError as exc:
                rid = request_id_var.get("")
                logger.warning("[%s] Rejected token: %s", rid, exc.context.get("reason"))
                return JSONResponse(
                    status_code=exc.status_code,
                    content={"error": exc.message, "request_id": rid},
                    headers={"WWW-Authenticate": "Bearer"},
                )

        return await call_next(request)


def get_identity(request: Request) -> Optional[Identity]:
    """FastAPI dependency: the identity attached by IdentityMiddleware, if any."""
    return getattr(request.state, "identity", None)

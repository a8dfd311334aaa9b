# food_orders/deps.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from food_orders.core.request_context import set_request_context
from food_orders.services.auth import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_subject(payload: Dict[str, Any]) -> Optional[str]:
    raw = payload.get("sub")
    if raw is None:
        return None
    raw = str(raw).strip()
    return raw or None


def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """Validate the admin Bearer token and return its payload."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
    except ValueError as exc:
        logger.warning("Admin token rejected path=%s reason=%s", request.url.path, exc)
        raise _unauthorized("Invalid or expired token")

    subject = _extract_subject(payload)
    if subject is None:
        raise _unauthorized("Invalid token (missing subject)")

    request.state.admin_subject = subject
    set_request_context(user_id=subject)
    return payload

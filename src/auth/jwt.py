"""Simple JWT authentication helpers."""
from __future__ import annotations

from typing import Any, Dict
from uuid import UUID

import jwt
from fastapi import Header, HTTPException, status

from src.core.config import settings


def create_access_token(user_id: UUID, **claims: Any) -> str:
    """Issue a bearer token for ``user_id`` (used by tooling and tests)."""

    payload = {"sub": str(user_id), **claims}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def require_auth(authorization: str = Header(...)) -> Dict[str, Any]:
    """Validate a bearer token and return the caller's user id and claims."""

    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
        )

    token = authorization.split(" ", 1)[1].strip()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
        )
    except jwt.InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        ) from exc

    if "sub" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Subject missing in token",
        )

    try:
        user_uuid = UUID(str(payload["sub"]))
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user identifier",
        ) from exc

    return {"user_id": user_uuid, "claims": payload}

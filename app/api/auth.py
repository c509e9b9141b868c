from __future__ import annotations

from fastapi import Header, HTTPException


def require_jwt(authorization: str = Header(...)) -> str:
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Invalid token.")
    return token.strip()

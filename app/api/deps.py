# app/api/deps.py
import hmac

from fastapi import Header, HTTPException

from app.utils import settings


def require_admin(authorization: str | None = Header(default=None)) -> bool:
    """
    Znacznik "zalogowany admin". Tokeny wydaje zewnetrzna warstwa auth,
    tu tylko porownujemy bearer ze skonfigurowanym ADMIN_API_TOKEN.
    """
    expected = settings.ADMIN_API_TOKEN
    if not expected:
        raise HTTPException(status_code=401, detail="admin access not configured")

    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="missing bearer token")

    token = authorization[len("Bearer "):].strip()
    if not hmac.compare_digest(token, expected):
        raise HTTPException(status_code=401, detail="invalid token")
    return True

from fastapi import Request, HTTPException, Depends
from typing import Dict, Any

COOKIE_NAME = "sb_access"

def _extract_token(request: Request) -> str | None:
    # Hybride: priorité au Bearer, fallback cookie
    token = None
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
    if not token:
        token = request.cookies.get(COOKIE_NAME)
    return token or None

def get_current_user(request: Request) -> Dict[str, Any]:
    """
    Résout l'identité de l'appelant à partir du token Supabase.
    Retour: {id, email, token}. 401 si token absent, invalide ou expiré.
    """
    token = _extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        from backend.users.repository import get_user_from_access_token
        raw = get_user_from_access_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Session expired, please log in again")

    if not raw or not raw.get("id"):
        raise HTTPException(status_code=401, detail="Session expired, please log in again")
    return {"id": str(raw["id"]), "email": raw.get("email"), "token": token}

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user

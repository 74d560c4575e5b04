# module backend.users.views
"""Endpoints du profil de l'utilisateur connecté (/api/my/user).
- GET: profil courant (404 si absent)
- POST: crée le profil à la première connexion (201), 200 sans corps s'il existe déjà
- PUT: met à jour nom et adresse (422 si un champ est vide)
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from backend.users import service as users_service
from backend.users.models import CreateUserRequest, UpdateUserRequest
from backend.utils.security import require_user

router = APIRouter(prefix="/api/my/user", tags=["My User API"])

@router.get("")
def get_current_user(user: Dict[str, Any] = Depends(require_user)):
    return users_service.get_current_profile(user["id"])

@router.post("")
def create_current_user(body: CreateUserRequest | None = None, user: Dict[str, Any] = Depends(require_user)):
    email = (body.email if body and body.email else None) or user.get("email")
    created, profile = users_service.create_current_profile(user["id"], email)
    if not created:
        return Response(status_code=200)
    return JSONResponse(profile, status_code=201)

@router.put("")
def update_current_user(body: UpdateUserRequest, user: Dict[str, Any] = Depends(require_user)):
    return users_service.update_current_profile(user["id"], body.model_dump())

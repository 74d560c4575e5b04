"""
Taxonomie d'erreurs applicatives.
Chaque classe est une HTTPException: le handler global (backend.app_setup.exceptions)
les convertit en {"detail": ...} avec le bon statut, aucune ne sort des vues.
"""
from fastapi import HTTPException


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str = "Already exists"):
        super().__init__(status_code=409, detail=detail)


class UnauthorizedError(HTTPException):
    """Ressource existante mais appartenant à un autre utilisateur."""
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=403, detail=detail)


class BadRequestError(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=400, detail=detail)


class ServerError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=500, detail=detail)


class SignatureVerificationFailed(HTTPException):
    """Webhook dont la signature (ou le payload) ne passe pas la vérification Stripe."""
    def __init__(self, detail: str = "Webhook signature verification failed"):
        super().__init__(status_code=500, detail=detail)

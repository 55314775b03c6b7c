"""
Dépendances FastAPI donnant accès aux services créés au démarrage.
"""

from fastapi import Request

from schoolrecords.services.auth_service import AuthService
from schoolrecords.services.password_hasher import PasswordHasher


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.core.auth


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.core.hasher

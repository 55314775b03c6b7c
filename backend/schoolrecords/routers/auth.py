"""
Router pour la session administrateur : connexion, déconnexion, état.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolrecords.database import get_db
from schoolrecords.dependencies import get_auth_service
from schoolrecords.errors import InvalidCredentials
from schoolrecords.schemas.admin import AdminResponse, LoginRequest, SessionState
from schoolrecords.services.auth_service import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["Authentification"])


@router.post("/login", response_model=AdminResponse, summary="Connexion administrateur")
def login(data: LoginRequest, db: Session = Depends(get_db), auth: AuthService = Depends(get_auth_service)):
    """Même réponse 401 que l'utilisateur soit inconnu ou le mot de passe faux."""
    try:
        return auth.login(db, data.username, data.password)
    except InvalidCredentials as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/logout", status_code=204, summary="Déconnexion")
def logout(auth: AuthService = Depends(get_auth_service)):
    auth.logout()


@router.get("/session", response_model=SessionState, summary="État de la session")
def session_state(auth: AuthService = Depends(get_auth_service)):
    return auth.session_state()

"""
Schémas Pydantic pour les administrateurs et la session de connexion.
Aucun schéma de réponse n'expose le mot de passe ou son hash.
"""

from typing import Optional

from pydantic import BaseModel, field_validator


class AdminCreate(BaseModel):
    name: str
    username: str
    password: str

    @field_validator("name", "username")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Le mot de passe ne peut pas être vide.")
        return v


class AdminUpdate(BaseModel):
    """Mise à jour : le mot de passe n'est re-haché que s'il est fourni."""
    name: str
    username: str
    password: Optional[str] = None

    @field_validator("name", "username")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()


class AdminResponse(BaseModel):
    id: int
    name: str
    username: str

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    username: str
    password: str


class SessionState(BaseModel):
    """État de connexion persisté entre deux lancements."""
    logged_in: bool
    admin: Optional[AdminResponse] = None

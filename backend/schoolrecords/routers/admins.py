"""
Router pour les comptes administrateur.
Les mots de passe sont hachés avant stockage et ne sont jamais renvoyés.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolrecords.database import get_db
from schoolrecords.dependencies import get_hasher
from schoolrecords.errors import LastAdminProtected
from schoolrecords.schemas.admin import AdminCreate, AdminResponse, AdminUpdate
from schoolrecords.services import admin_service
from schoolrecords.services.password_hasher import PasswordHasher

router = APIRouter(prefix="/api/v1/admins", tags=["Administrateurs"])


@router.get("", response_model=List[AdminResponse], summary="Lister les administrateurs")
def list_admins(db: Session = Depends(get_db)):
    return admin_service.get_admins(db)


@router.post("", response_model=AdminResponse, status_code=201, summary="Créer un administrateur")
def create_admin(
    data: AdminCreate,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
):
    try:
        return admin_service.add_admin(db, data, hasher)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{admin_id}", response_model=AdminResponse, summary="Modifier un administrateur")
def update_admin(
    admin_id: int,
    data: AdminUpdate,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
):
    """Le mot de passe n'est re-haché que s'il est fourni."""
    try:
        admin = admin_service.update_admin(db, admin_id, data, hasher)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if admin is None:
        raise HTTPException(status_code=404, detail="Administrateur introuvable.")
    return admin


@router.delete("/{admin_id}", status_code=204, summary="Supprimer un administrateur")
def delete_admin(admin_id: int, db: Session = Depends(get_db)):
    """Refusé (409) s'il ne reste qu'un seul administrateur."""
    try:
        deleted = admin_service.delete_admin(db, admin_id)
    except LastAdminProtected as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Administrateur introuvable.")

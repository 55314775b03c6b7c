"""
Service métier pour les comptes administrateur.
Règle : il doit toujours rester au moins un administrateur.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schoolrecords.errors import DuplicateKey, LastAdminProtected
from schoolrecords.models.admin import Admin
from schoolrecords.schemas.admin import AdminCreate, AdminResponse, AdminUpdate
from schoolrecords.services.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)


def add_admin(db: Session, data: AdminCreate, hasher: PasswordHasher) -> AdminResponse:
    """Crée un administrateur ; le mot de passe est haché avant stockage."""
    if _username_taken(db, data.username):
        raise DuplicateKey(f"Le nom d'utilisateur '{data.username}' est déjà utilisé.")

    admin = Admin(name=data.name, username=data.username, password=hasher.hash(data.password))
    db.add(admin)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey(f"Le nom d'utilisateur '{data.username}' est déjà utilisé.")
    db.refresh(admin)
    logger.info("Administrateur %s créé (%s)", admin.id, admin.username)
    return AdminResponse.model_validate(admin)


def update_admin(
    db: Session, admin_id: int, data: AdminUpdate, hasher: PasswordHasher
) -> Optional[AdminResponse]:
    """Met à jour nom et identifiant ; le mot de passe seulement s'il est fourni."""
    admin = db.get(Admin, admin_id)
    if admin is None:
        return None

    if data.username != admin.username and _username_taken(db, data.username):
        raise DuplicateKey(f"Le nom d'utilisateur '{data.username}' est déjà utilisé.")

    admin.name = data.name
    admin.username = data.username
    if data.password:
        admin.password = hasher.hash(data.password)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey(f"Le nom d'utilisateur '{data.username}' est déjà utilisé.")
    db.refresh(admin)
    return AdminResponse.model_validate(admin)


def delete_admin(db: Session, admin_id: int) -> bool:
    """
    Supprime un administrateur.
    Bloqué (LastAdminProtected) s'il n'en reste qu'un : aucune suppression n'a lieu.
    Retourne True si supprimé, False si introuvable.
    """
    total = count_admins(db)
    if total <= 1:
        raise LastAdminProtected("Impossible de supprimer le dernier administrateur.")

    admin = db.get(Admin, admin_id)
    if admin is None:
        return False
    db.delete(admin)
    db.commit()
    logger.info("Administrateur %s supprimé", admin_id)
    return True


def get_admins(db: Session) -> list[AdminResponse]:
    """Liste les administrateurs triés par nom, sans leurs mots de passe."""
    admins = db.execute(select(Admin).order_by(Admin.name)).scalars().all()
    return [AdminResponse.model_validate(a) for a in admins]


def get_admin_by_username(db: Session, username: str) -> Optional[Admin]:
    """
    Usage interne (authentification) : retourne la ligne complète, hash compris.
    Les anciennes tables admin n'imposent pas l'unicité du nom d'utilisateur :
    en cas de doublon, la ligne la plus ancienne est retenue.
    """
    return db.execute(
        select(Admin).where(Admin.username == username).order_by(Admin.id)
    ).scalars().first()


def count_admins(db: Session) -> int:
    return db.execute(select(func.count()).select_from(Admin)).scalar() or 0


def _username_taken(db: Session, username: str) -> bool:
    return db.execute(select(Admin.id).where(Admin.username == username)).first() is not None

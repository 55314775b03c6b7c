"""
Mise à niveau des mots de passe administrateur stockés en clair.

Doit s'exécuter après ensure_schema() et avant toute tentative de connexion :
la vérification du login suppose que tous les mots de passe sont hachés.
Idempotent : une fois toutes les lignes hachées, ce n'est plus qu'un parcours.
"""

import logging

from sqlalchemy import bindparam, select, update
from sqlalchemy.exc import SQLAlchemyError

from schoolrecords.database import ConnectionManager
from schoolrecords.errors import SchemaError
from schoolrecords.models.admin import Admin
from schoolrecords.services.password_hasher import PasswordHasher, is_hashed

logger = logging.getLogger(__name__)

admin_table = Admin.__table__


def migrate_weak_credentials(connections: ConnectionManager, hasher: PasswordHasher) -> int:
    """
    Hache chaque mot de passe en clair et applique toutes les mises à jour
    en un seul lot. Retourne le nombre de lignes mises à jour.
    """
    try:
        with connections.transaction() as conn:
            rows = conn.execute(
                select(admin_table.c.adm_id, admin_table.c.password)
            ).all()

            updates = [
                {"b_id": adm_id, "b_password": hasher.hash(stored)}
                for adm_id, stored in rows
                if stored is not None and not is_hashed(stored)
            ]

            if updates:
                conn.execute(
                    update(admin_table)
                    .where(admin_table.c.adm_id == bindparam("b_id"))
                    .values(password=bindparam("b_password")),
                    updates,
                )
    except SQLAlchemyError as exc:
        logger.error("Migration des mots de passe échouée : %s", exc)
        raise SchemaError("Migration des mots de passe administrateur impossible.") from exc

    if updates:
        logger.info("%d mot(s) de passe en clair converti(s) en hash.", len(updates))
    return len(updates)

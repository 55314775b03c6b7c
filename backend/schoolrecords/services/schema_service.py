"""
Création et mise à niveau du schéma (appelé à chaque démarrage).

Idempotent : les huit tables sont créées si absentes, puis les colonnes
ajoutées depuis les premières versions (profile_pic) sont ajoutées si elles
manquent. Seules des migrations additives sont faites : aucune colonne n'est
supprimée ni renommée.

Un échec de création de table est fatal (SchemaError) ; un échec de
migration de colonne est journalisé et le démarrage continue.
"""

import logging

from sqlalchemy import LargeBinary, inspect, text
from sqlalchemy.exc import SQLAlchemyError

import schoolrecords.models  # noqa: F401 (enregistre toutes les tables dans Base.metadata)
from schoolrecords.database import Base, ConnectionManager
from schoolrecords.errors import SchemaError

logger = logging.getLogger(__name__)

# Ordre de création : les tables référencées par une FK précèdent leurs dépendantes
REQUIRED_TABLES = [
    "students",
    "admin",
    "teachers",
    "subjects",
    "teacher_assignments",
    "class_levels",
    "student_attendance",
    "student_payments",
]

# (table, colonne) ajoutées après la première version du schéma
ADDITIVE_COLUMNS = [
    ("students", "profile_pic"),
    ("teachers", "profile_pic"),
]


def ensure_schema(connections: ConnectionManager) -> None:
    """Crée les tables manquantes puis applique les migrations de colonnes."""
    for table_name in REQUIRED_TABLES:
        table = Base.metadata.tables[table_name]
        try:
            with connections.transaction() as conn:
                table.create(conn, checkfirst=True)
        except SQLAlchemyError as exc:
            logger.error("Création de la table %s impossible : %s", table_name, exc)
            raise SchemaError(f"Création de la table {table_name} impossible.") from exc

    for table_name, column_name in ADDITIVE_COLUMNS:
        try:
            _add_column_if_missing(connections, table_name, column_name)
        except SQLAlchemyError as exc:
            # Colonne optionnelle : ne doit pas empêcher le démarrage
            logger.error("Migration de %s.%s échouée : %s", table_name, column_name, exc)


def get_column_names(connections: ConnectionManager, table_name: str) -> set[str]:
    """Colonnes réelles d'une table, en minuscules, via l'inspecteur SQLAlchemy."""
    with connections.connection() as conn:
        return {col["name"].lower() for col in inspect(conn).get_columns(table_name)}


def _add_column_if_missing(connections: ConnectionManager, table_name: str, column_name: str) -> bool:
    if column_name.lower() in get_column_names(connections, table_name):
        return False

    with connections.transaction() as conn:
        column_type = LargeBinary().compile(dialect=conn.dialect)  # BLOB / BYTEA
        conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_type}"))

    logger.info("Colonne %s ajoutée à la table %s.", column_name, table_name)
    return True

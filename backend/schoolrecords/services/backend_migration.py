"""
Migration unique des données de la base de repli (SQLite) vers la base
principale, au premier démarrage où la base principale est disponible.

Stratégie :
- Ne s'exécute que si la base principale est active et que le drapeau
  « migration terminée » n'est pas encore posé
- Si la table students de la base principale contient déjà des lignes, la
  migration est considérée comme faite (drapeau posé, rien n'est copié)
- Sinon, cinq tables sont copiées telles quelles, clés primaires comprises,
  en une insertion par lot par table
- Toute erreur interrompt la passe sans poser le drapeau : la suivante
  réessaiera au prochain démarrage

Limite connue : chaque table est validée séparément. Une passe interrompue
après la copie de students mais avant les tables suivantes est ensuite
masquée par le contrôle « students non vide ».
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy import func, insert, inspect, select
from sqlalchemy.engine import Connection, Engine

import schoolrecords.models  # noqa: F401 (enregistre toutes les tables dans Base.metadata)
from schoolrecords.database import Base, ConnectionManager, create_store_engine, resync_identity
from schoolrecords.settings_store import BACKEND_MIGRATION_DONE, SettingsStore

logger = logging.getLogger(__name__)

# Ordre fixe : les tables référencées sont copiées avant leurs dépendantes
MIGRATED_TABLES = ["admin", "students", "teachers", "student_attendance", "student_payments"]


class BackendMigrator:
    def __init__(
        self,
        connections: ConnectionManager,
        store: SettingsStore,
        fallback_database_path: str,
        fallback_engine_factory: Optional[Callable[[str], Engine]] = None,
    ):
        self._connections = connections
        self._store = store
        self._fallback_path = fallback_database_path
        self._engine_factory = fallback_engine_factory or (
            lambda url: create_store_engine(url, pooled=False)
        )

    def migrate_if_needed(self) -> int:
        """
        Retourne le nombre total de lignes copiées. Ne lève jamais :
        les erreurs sont journalisées et la passe est abandonnée.
        """
        if not self._connections.is_primary_active():
            return 0
        if self._store.get_bool(BACKEND_MIGRATION_DONE):
            return 0
        if not Path(self._fallback_path).exists():
            logger.info("Aucune base locale à migrer (%s).", self._fallback_path)
            return 0

        logger.info("Vérification de la nécessité d'une migration vers la base principale...")
        fallback_engine = None
        try:
            fallback_engine = self._engine_factory(f"sqlite:///{self._fallback_path}")

            with self._connections.connection() as primary_conn:
                existing = count_rows(primary_conn, "students")

            if existing > 0:
                logger.info("Base principale non vide (%d élèves) : migration ignorée.", existing)
                self._store.set_bool(BACKEND_MIGRATION_DONE, True)
                return 0

            logger.info("Base principale vide : copie des données locales...")
            copied = 0
            with fallback_engine.connect() as source_conn:
                for table_name in MIGRATED_TABLES:
                    with self._connections.transaction() as dest_conn:
                        copied += _copy_table(source_conn, dest_conn, table_name)

            self._store.set_bool(BACKEND_MIGRATION_DONE, True)
            logger.info("Migration vers la base principale terminée : %d lignes copiées.", copied)
            return copied

        except Exception as exc:
            logger.error("Migration vers la base principale échouée : %s", exc, exc_info=True)
            return 0
        finally:
            if fallback_engine is not None:
                fallback_engine.dispose()


def _copy_table(source_conn: Connection, dest_conn: Connection, table_name: str) -> int:
    """
    Copie toutes les lignes d'une table en un seul executemany.

    Les colonnes sont lues dans l'ordre canonique de la table ; une colonne
    additive absente de l'ancienne base (ex. profile_pic) est insérée à NULL.
    """
    table = Base.metadata.tables[table_name]
    source_columns = {col["name"].lower() for col in inspect(source_conn).get_columns(table_name)}
    present = [col for col in table.columns if col.name.lower() in source_columns]

    logger.info("Migration de la table %s", table_name)
    rows = source_conn.execute(select(*present)).all()
    if not rows:
        return 0

    keys = [col.name for col in present]
    mappings = [dict(zip(keys, row)) for row in rows]
    dest_conn.execute(insert(table), mappings)

    pk_column = table.primary_key.columns.values()[0].name
    resync_identity(dest_conn, table, pk_column)

    logger.info("Table %s : %d lignes copiées", table_name, len(mappings))
    return len(mappings)


def count_rows(conn: Connection, table_name: str) -> int:
    table = Base.metadata.tables[table_name]
    return conn.execute(select(func.count()).select_from(table)).scalar() or 0

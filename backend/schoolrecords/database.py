"""
Gestion des connexions à la base de données.

Au démarrage, une connexion de test est tentée vers la base principale
(PostgreSQL). En cas d'échec (réseau, authentification, pilote absent), le
même pool borné est configuré sur la base de repli SQLite locale. Le choix
est fait une seule fois par processus : pas de nouvelle tentative ensuite.
"""

import enum
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, func, select, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, QueuePool

from schoolrecords.config import Settings
from schoolrecords.errors import BackendUnavailable

logger = logging.getLogger(__name__)

Base = declarative_base()


class BackendKind(str, enum.Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite n'applique les clés étrangères que si on le demande à chaque connexion."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_store_engine(
    url: str,
    pool_size: int = 10,
    pool_timeout: int = 30,
    statement_cache_size: int = 250,
    pooled: bool = True,
) -> Engine:
    """
    Construit un moteur SQLAlchemy pour l'une ou l'autre base.
    Le cache de requêtes compilées (et, pour SQLite, le cache de statements du
    pilote) joue le rôle du cache de requêtes préparées.
    """
    kwargs = {"query_cache_size": statement_cache_size}
    connect_args = {}

    if _is_sqlite(url):
        database = make_url(url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        connect_args = {"check_same_thread": False, "cached_statements": statement_cache_size}

    if pooled:
        kwargs.update(
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=pool_timeout,
            pool_pre_ping=True,
        )
    else:
        kwargs["poolclass"] = NullPool

    engine = create_engine(url, connect_args=connect_args, **kwargs)
    if _is_sqlite(url):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def probe_primary(url: str, timeout: int = 3) -> bool:
    """Ouvre une unique connexion de test vers la base principale. Ne lève jamais."""
    try:
        connect_args = {} if _is_sqlite(url) else {"connect_timeout": timeout}
        engine = create_engine(url, poolclass=NullPool, connect_args=connect_args)
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        finally:
            engine.dispose()
    except Exception as exc:
        logger.info("Base principale injoignable (%s)", exc.__class__.__name__)
        return False
    return True


def resync_identity(conn: Connection, table, pk_column: str) -> None:
    """
    Recale la séquence d'identité PostgreSQL après des insertions portant des
    clés primaires explicites. Sans effet sur SQLite (rowid = max + 1).
    """
    if conn.dialect.name != "postgresql":
        return
    max_id = conn.execute(select(func.max(table.c[pk_column]))).scalar()
    if max_id is None:
        return
    conn.execute(
        text("SELECT setval(pg_get_serial_sequence(:table, :column), :value)"),
        {"table": table.name, "column": pk_column, "value": max_id},
    )


class ConnectionManager:
    """
    Pool borné de connexions vers exactement une base active.

    acquire()/release() exposent des connexions brutes (migrations) ;
    connection(), transaction() et session() garantissent la restitution
    au pool sur tous les chemins de sortie.
    """

    def __init__(
        self,
        kind: BackendKind,
        url: str,
        pool_size: int = 10,
        pool_timeout: int = 30,
        statement_cache_size: int = 250,
    ):
        self.kind = kind
        self.url = url
        self.engine = create_store_engine(url, pool_size, pool_timeout, statement_cache_size)
        self._session_factory = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        self._closed = False

    @classmethod
    def select_backend(cls, settings: Settings) -> "ConnectionManager":
        """Choisit la base active une fois pour toutes au démarrage du processus."""
        pool_args = (settings.POOL_SIZE, settings.POOL_TIMEOUT, settings.STATEMENT_CACHE_SIZE)

        if probe_primary(settings.PRIMARY_DATABASE_URL, settings.PRIMARY_CONNECT_TIMEOUT):
            logger.info("Pool de connexions configuré sur la base principale.")
            return cls(BackendKind.PRIMARY, settings.PRIMARY_DATABASE_URL, *pool_args)

        logger.warning(
            "Base principale indisponible, repli sur la base locale %s",
            settings.FALLBACK_DATABASE_PATH,
        )
        try:
            return cls(BackendKind.FALLBACK, settings.fallback_database_url, *pool_args)
        except Exception as exc:
            raise BackendUnavailable("Aucune base de données n'est disponible.") from exc

    def is_primary_active(self) -> bool:
        return self.kind is BackendKind.PRIMARY

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise BackendUnavailable("Le pool de connexions est fermé.")

    def acquire(self) -> Connection:
        """Emprunte une connexion au pool. L'appelant doit appeler release()."""
        self._ensure_open()
        try:
            return self.engine.connect()
        except SQLAlchemyError as exc:
            logger.error("Impossible d'obtenir une connexion : %s", exc)
            raise BackendUnavailable("Base de données injoignable.") from exc

    def release(self, conn: Connection) -> None:
        """Rend la connexion au pool (une transaction ouverte est annulée)."""
        conn.close()

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Connexion dans une transaction : commit en sortie normale, rollback sinon."""
        with self.connection() as conn:
            with conn.begin():
                yield conn

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session ORM pour une opération ; toujours fermée, annulée en cas d'erreur."""
        self._ensure_open()
        db = self._session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def shutdown(self) -> None:
        """Libère le pool. Idempotent ; acquire() échoue ensuite."""
        if self._closed:
            return
        self._closed = True
        self.engine.dispose()
        logger.info("Pool de connexions fermé (%s).", self.kind.value)


def get_db(request: Request) -> Iterator[Session]:
    """Dépendance FastAPI : fournit une session BDD et la ferme après usage."""
    connections: ConnectionManager = request.app.state.core.connections
    with connections.session() as db:
        yield db

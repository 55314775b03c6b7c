"""
Séquence de démarrage et d'arrêt de la couche de persistance.

Ordre imposé :
1. Choix de la base active (principale ou repli)
2. Création / mise à niveau du schéma (fatal si une table ne peut être créée)
3. Hachage des mots de passe encore en clair, avant toute connexion
   (repris après la migration pour les comptes copiés)
4. Migration des données locales vers la base principale, si nécessaire
5. Reconnexion automatique de la session précédente
"""

import logging
from dataclasses import dataclass
from typing import Optional

from schoolrecords.config import Settings
from schoolrecords.database import ConnectionManager
from schoolrecords.errors import SchemaError
from schoolrecords.services.auth_service import AuthService
from schoolrecords.services.backend_migration import BackendMigrator
from schoolrecords.services.credential_migration import migrate_weak_credentials
from schoolrecords.services.password_hasher import PasswordHasher
from schoolrecords.services.schema_service import ensure_schema
from schoolrecords.settings_store import SettingsStore

logger = logging.getLogger(__name__)


@dataclass
class CoreContext:
    settings: Settings
    connections: ConnectionManager
    store: SettingsStore
    hasher: PasswordHasher
    auth: AuthService


def start_core(settings: Settings, connections: Optional[ConnectionManager] = None) -> CoreContext:
    """Prépare la persistance. Lève BackendUnavailable ou SchemaError si le démarrage est impossible."""
    store = SettingsStore(settings.SETTINGS_STORE_PATH)
    hasher = PasswordHasher(settings.PASSWORD_HASH_METHOD)

    if connections is None:
        connections = ConnectionManager.select_backend(settings)
    logger.info("Base active : %s", connections.kind.value)

    try:
        ensure_schema(connections)
    except SchemaError:
        connections.shutdown()
        store.close()
        raise

    _upgrade_credentials(connections, hasher)

    copied = BackendMigrator(connections, store, settings.FALLBACK_DATABASE_PATH).migrate_if_needed()
    if copied:
        # Les comptes copiés depuis la base locale peuvent encore être en clair
        _upgrade_credentials(connections, hasher)

    auth = AuthService(store, hasher)
    with connections.session() as db:
        auth.attempt_auto_login(db)

    return CoreContext(settings=settings, connections=connections, store=store, hasher=hasher, auth=auth)


def _upgrade_credentials(connections: ConnectionManager, hasher: PasswordHasher) -> None:
    try:
        migrate_weak_credentials(connections, hasher)
    except SchemaError:
        logger.error("Des mots de passe restent en clair : ces comptes ne pourront pas se connecter.")


def stop_core(core: CoreContext) -> None:
    """Ferme le pool puis le magasin de paramètres. Peut être appelé plusieurs fois."""
    core.connections.shutdown()
    core.store.close()
    logger.info("Couche de persistance arrêtée.")

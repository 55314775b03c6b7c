"""
Authentification des administrateurs et état de session persisté.

Le drapeau « connecté » et le dernier identifiant utilisé survivent au
redémarrage (SettingsStore) pour permettre la reconnexion automatique.
"""

import logging
import threading
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schoolrecords.errors import InvalidCredentials
from schoolrecords.schemas.admin import AdminResponse, SessionState
from schoolrecords.services import admin_service
from schoolrecords.services.password_hasher import PasswordHasher
from schoolrecords.settings_store import IS_LOGGED_IN, LAST_LOGGED_IN_USER, SettingsStore

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, store: SettingsStore, hasher: PasswordHasher):
        self._store = store
        self._hasher = hasher
        self._lock = threading.Lock()
        self._current_admin: Optional[AdminResponse] = None

    @property
    def current_admin(self) -> Optional[AdminResponse]:
        return self._current_admin

    def is_logged_in(self) -> bool:
        return self._store.get_bool(IS_LOGGED_IN)

    def session_state(self) -> SessionState:
        return SessionState(logged_in=self.is_logged_in(), admin=self._current_admin)

    def login(self, db: Session, username: str, password: str) -> AdminResponse:
        """
        Vérifie l'identifiant et le mot de passe.
        Utilisateur inconnu et mauvais mot de passe donnent la même erreur.
        """
        admin = admin_service.get_admin_by_username(db, username)
        verified = admin is not None and self._hasher.verify(password, admin.password)

        with self._lock:
            if not verified:
                self._set_logged_in(None)
                logger.info("Échec de connexion pour '%s'", username)
                raise InvalidCredentials("Identifiant ou mot de passe incorrect.")

            identity = AdminResponse.model_validate(admin)
            self._set_logged_in(identity)

        if self._hasher.needs_rehash(admin.password):
            self._upgrade_hash(db, admin, password)

        logger.info("Administrateur '%s' connecté", identity.username)
        return identity

    def attempt_auto_login(self, db: Session) -> bool:
        """
        Restaure la session précédente si le drapeau est encore posé.

        Si le dernier identifiant n'existe plus, le drapeau est tout de même
        conservé et aucune identité n'est rattachée (comportement historique).
        """
        if not self.is_logged_in():
            return False

        last_user = self._store.get(LAST_LOGGED_IN_USER)
        identity = None
        if last_user and last_user.strip():
            admin = admin_service.get_admin_by_username(db, last_user)
            if admin is not None:
                identity = AdminResponse.model_validate(admin)
            else:
                logger.warning("Reconnexion automatique : '%s' n'existe plus", last_user)

        with self._lock:
            self._current_admin = identity
            self._store.set_bool(IS_LOGGED_IN, True)
        return True

    def logout(self) -> None:
        with self._lock:
            self._set_logged_in(None)

    def _upgrade_hash(self, db: Session, admin, password: str) -> None:
        """Remplace un hash hérité (BCrypt) par la méthode courante ; un échec n'empêche pas la connexion."""
        try:
            admin.password = self._hasher.hash(password)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Mise à niveau du hash de '%s' impossible : %s", admin.username, exc)
            return
        logger.info("Hash du mot de passe de '%s' mis à niveau", admin.username)

    def _set_logged_in(self, identity: Optional[AdminResponse]) -> None:
        self._current_admin = identity
        self._store.set_bool(IS_LOGGED_IN, identity is not None)
        if identity is not None:
            self._store.set(LAST_LOGGED_IN_USER, identity.username)
        else:
            self._store.remove(LAST_LOGGED_IN_USER)

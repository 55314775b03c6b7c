"""
Configuration partagée pour tous les tests.

- Les tests de services tournent sur une vraie base SQLite dans tmp_path
  (même schéma, mêmes requêtes que la base principale).
- Les tests d'API mockent la session BDD et le service d'authentification,
  et remplacent la séquence de démarrage pour éviter toute connexion réelle.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from schoolrecords.database import BackendKind, ConnectionManager, get_db
from schoolrecords.dependencies import get_auth_service, get_hasher
from schoolrecords.main import app
from schoolrecords.services.password_hasher import PasswordHasher
from schoolrecords.services.schema_service import ensure_schema
from schoolrecords.settings_store import SettingsStore

# Hachage rapide réservé aux tests
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


@pytest.fixture
def connections(tmp_path):
    """Pool sur une base SQLite vierge, schéma créé."""
    manager = ConnectionManager(BackendKind.FALLBACK, f"sqlite:///{tmp_path / 'main.db'}", pool_size=5)
    ensure_schema(manager)
    yield manager
    manager.shutdown()


@pytest.fixture
def db(connections):
    with connections.session() as session:
        yield session


@pytest.fixture
def hasher():
    return PasswordHasher(FAST_HASH_METHOD)


@pytest.fixture
def store(tmp_path):
    settings_store = SettingsStore(str(tmp_path / "settings.json"))
    yield settings_store
    settings_store.close()


@pytest.fixture
def mock_auth():
    return MagicMock()


@pytest.fixture
def client(mock_auth):
    """Client HTTP de test avec la BDD et l'authentification mockées."""
    mock_db = MagicMock()
    core = MagicMock()
    core.connections.kind = BackendKind.FALLBACK

    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_auth_service] = lambda: mock_auth
    app.dependency_overrides[get_hasher] = lambda: PasswordHasher(FAST_HASH_METHOD)
    with patch("schoolrecords.main.start_core", return_value=core), \
            patch("schoolrecords.main.stop_core"):
        with TestClient(app) as c:
            yield c
    app.dependency_overrides.clear()

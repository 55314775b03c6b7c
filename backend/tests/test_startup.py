"""
Tests de la séquence de démarrage et d'arrêt.
"""

from unittest.mock import patch

import pytest
from sqlalchemy import select, text

from schoolrecords.config import Settings
from schoolrecords.database import BackendKind, ConnectionManager
from schoolrecords.errors import SchemaError
from schoolrecords.models.admin import Admin
from schoolrecords.services.password_hasher import is_hashed
from schoolrecords.services.schema_service import ensure_schema
from schoolrecords.settings_store import IS_LOGGED_IN, LAST_LOGGED_IN_USER, SettingsStore
from schoolrecords.startup import start_core, stop_core

FAST_HASH_METHOD = "pbkdf2:sha256:1000"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        FALLBACK_DATABASE_PATH=str(tmp_path / "absent.db"),
        SETTINGS_STORE_PATH=str(tmp_path / "settings.json"),
        PASSWORD_HASH_METHOD=FAST_HASH_METHOD,
    )


@pytest.fixture
def manager(tmp_path):
    return ConnectionManager(BackendKind.FALLBACK, f"sqlite:///{tmp_path / 'main.db'}")


def test_start_core_hache_puis_reconnecte(settings, manager):
    """Mot de passe en clair haché avant la reconnexion automatique."""
    ensure_schema(manager)
    with manager.transaction() as conn:
        conn.execute(text("INSERT INTO admin (adm_name, adm_username, password) VALUES ('Admin', 'admin', 'admin123')"))
    previous = SettingsStore(settings.SETTINGS_STORE_PATH)
    previous.set_bool(IS_LOGGED_IN, True)
    previous.set(LAST_LOGGED_IN_USER, "admin")
    previous.close()

    core = start_core(settings, connections=manager)

    with manager.connection() as conn:
        stored = conn.execute(select(Admin.__table__.c.password)).scalar()
    assert is_hashed(stored)
    assert core.auth.current_admin.username == "admin"
    assert core.auth.is_logged_in() is True

    stop_core(core)
    stop_core(core)
    assert manager.is_closed


def test_start_core_base_vierge(settings, manager):
    core = start_core(settings, connections=manager)

    assert core.connections.kind is BackendKind.FALLBACK
    assert core.auth.is_logged_in() is False
    with manager.connection() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM students")).scalar() == 0
    stop_core(core)


def test_start_core_echec_schema_fatal(settings, manager):
    with patch("schoolrecords.startup.ensure_schema", side_effect=SchemaError("boom")):
        with pytest.raises(SchemaError):
            start_core(settings, connections=manager)

    assert manager.is_closed


def test_start_core_choisit_la_base(settings, manager):
    with patch("schoolrecords.startup.ConnectionManager.select_backend", return_value=manager) as mock_select:
        core = start_core(settings)

    mock_select.assert_called_once_with(settings)
    assert core.connections is manager
    stop_core(core)


def test_start_core_hache_les_comptes_copies(tmp_path):
    """Un mot de passe en clair copié depuis la base locale est haché dès ce démarrage."""
    local = ConnectionManager(BackendKind.FALLBACK, f"sqlite:///{tmp_path / 'local.db'}")
    ensure_schema(local)
    with local.transaction() as conn:
        conn.execute(text("INSERT INTO admin (adm_name, adm_username, password) VALUES ('Admin', 'admin', 'admin123')"))
    local.shutdown()
    primary = ConnectionManager(BackendKind.PRIMARY, f"sqlite:///{tmp_path / 'primary.db'}")
    settings = Settings(
        FALLBACK_DATABASE_PATH=str(tmp_path / "local.db"),
        SETTINGS_STORE_PATH=str(tmp_path / "settings.json"),
        PASSWORD_HASH_METHOD=FAST_HASH_METHOD,
    )

    core = start_core(settings, connections=primary)

    with primary.connection() as conn:
        stored = conn.execute(select(Admin.__table__.c.password)).scalar()
    assert is_hashed(stored)
    with primary.session() as db:
        assert core.auth.login(db, "admin", "admin123").username == "admin"
    stop_core(core)

"""
Tests de la création et de la mise à niveau du schéma.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError

from schoolrecords.database import BackendKind, ConnectionManager
from schoolrecords.errors import SchemaError
from schoolrecords.services.schema_service import REQUIRED_TABLES, ensure_schema, get_column_names


def test_ensure_schema_cree_les_huit_tables(connections):
    with connections.connection() as conn:
        tables = set(inspect(conn).get_table_names())

    assert set(REQUIRED_TABLES) <= tables
    assert len(REQUIRED_TABLES) == 8


def test_ensure_schema_idempotent(connections):
    """Deux exécutions → même schéma, aucune erreur, données conservées."""
    with connections.transaction() as conn:
        conn.execute(text("INSERT INTO class_levels (class_name) VALUES ('5A')"))

    before = {t: get_column_names(connections, t) for t in REQUIRED_TABLES}
    ensure_schema(connections)
    after = {t: get_column_names(connections, t) for t in REQUIRED_TABLES}

    assert before == after
    with connections.connection() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM class_levels")).scalar() == 1


def test_ensure_schema_ajoute_profile_pic_aux_anciennes_tables(tmp_path):
    """Une base créée avant l'ajout des photos reçoit la colonne manquante."""
    manager = ConnectionManager(BackendKind.FALLBACK, f"sqlite:///{tmp_path / 'legacy.db'}")
    with manager.transaction() as conn:
        conn.execute(text(
            "CREATE TABLE students (std_id INTEGER PRIMARY KEY, std_fname TEXT NOT NULL, "
            "std_mname TEXT, std_lname TEXT NOT NULL, std_gender TEXT NOT NULL, "
            "std_dob TEXT, std_class INTEGER)"
        ))
        conn.execute(text(
            "INSERT INTO students (std_id, std_fname, std_lname, std_gender) "
            "VALUES (7, 'Amina', 'Diallo', 'Female')"
        ))

    ensure_schema(manager)

    assert "profile_pic" in get_column_names(manager, "students")
    assert "profile_pic" in get_column_names(manager, "teachers")
    with manager.connection() as conn:
        assert conn.execute(text("SELECT std_fname FROM students WHERE std_id = 7")).scalar() == "Amina"
    manager.shutdown()


def test_ensure_schema_echec_creation_table():
    """Impossible de créer une table → SchemaError (fatal au démarrage)."""
    connections = MagicMock()
    connections.transaction.side_effect = OperationalError("CREATE TABLE", {}, Exception("disk full"))

    with pytest.raises(SchemaError):
        ensure_schema(connections)


def test_get_column_names_en_minuscules(connections):
    columns = get_column_names(connections, "admin")
    assert columns == {"adm_id", "adm_name", "adm_username", "password"}

"""
Tests de la migration unique de la base locale vers la base principale.
Les deux bases sont des fichiers SQLite ; celle marquée PRIMARY joue le rôle
de la base principale.
"""

from datetime import date

import pytest
from sqlalchemy import text

from schoolrecords.database import Base, BackendKind, ConnectionManager
from schoolrecords.schemas.attendance import AttendanceItem
from schoolrecords.schemas.payment import PaymentCreate
from schoolrecords.schemas.student import StudentCreate, StudentImportRow
from schoolrecords.services import attendance_service, payment_service, student_service
from schoolrecords.services.backend_migration import BackendMigrator, count_rows
from schoolrecords.services.schema_service import ensure_schema
from schoolrecords.settings_store import BACKEND_MIGRATION_DONE

STUDENT_IDS = [101, 102, 103, 104, 105]


def make_row(student_id: int) -> StudentImportRow:
    return StudentImportRow(id=student_id, first_name=f"E{student_id}", last_name="Local", gender="Female")


@pytest.fixture
def fallback_path(tmp_path):
    """Base locale avec 5 élèves, 1 administrateur, 1 présence et 1 paiement."""
    path = tmp_path / "fallback.db"
    manager = ConnectionManager(BackendKind.FALLBACK, f"sqlite:///{path}")
    ensure_schema(manager)
    with manager.session() as db:
        student_service.add_students_batch(db, [make_row(i) for i in STUDENT_IDS])
        attendance_service.save_attendance(
            db, [AttendanceItem(student_id=101, attendance_date=date(2024, 3, 1), status="Late")]
        )
        payment_service.add_payment(
            db, PaymentCreate(student_id=102, amount_paid=80.0, payment_date=date(2024, 3, 2))
        )
    with manager.transaction() as conn:
        conn.execute(text(
            "INSERT INTO admin (adm_name, adm_username, password) VALUES ('Admin', 'admin', 'pbkdf2:sha256:1$x$y')"
        ))
    manager.shutdown()
    return str(path)


@pytest.fixture
def primary(tmp_path):
    manager = ConnectionManager(BackendKind.PRIMARY, f"sqlite:///{tmp_path / 'primary.db'}")
    ensure_schema(manager)
    yield manager
    manager.shutdown()


def primary_count(manager, table_name: str) -> int:
    with manager.connection() as conn:
        return count_rows(conn, table_name)


def test_migration_copie_les_donnees(primary, store, fallback_path):
    copied = BackendMigrator(primary, store, fallback_path).migrate_if_needed()

    assert copied == 5 + 1 + 1 + 1
    assert store.get_bool(BACKEND_MIGRATION_DONE) is True
    with primary.session() as db:
        assert [s.id for s in student_service.get_students(db)] == STUDENT_IDS
        assert [p.amount_paid for p in payment_service.get_student_payments(db, 102)] == [80.0]
        records = attendance_service.get_attendance_for_date(db, date(2024, 3, 1))
        assert [(r.student_id, r.status) for r in records] == [(101, "Late")]
    assert primary_count(primary, "admin") == 1


def test_seconde_execution_sans_effet(primary, store, fallback_path):
    migrator = BackendMigrator(primary, store, fallback_path)
    migrator.migrate_if_needed()

    assert migrator.migrate_if_needed() == 0
    assert primary_count(primary, "students") == 5


def test_principale_non_vide_pose_le_drapeau(primary, store, fallback_path):
    with primary.session() as db:
        student_service.add_student(db, StudentCreate(first_name="Déjà", last_name="Là", gender="Male"))

    assert BackendMigrator(primary, store, fallback_path).migrate_if_needed() == 0
    assert store.get_bool(BACKEND_MIGRATION_DONE) is True
    assert primary_count(primary, "students") == 1


def test_ignoree_si_base_de_repli_active(connections, store, fallback_path):
    assert BackendMigrator(connections, store, fallback_path).migrate_if_needed() == 0
    assert store.get_bool(BACKEND_MIGRATION_DONE) is False


def test_ignoree_si_fichier_local_absent(primary, store, tmp_path):
    assert BackendMigrator(primary, store, str(tmp_path / "absent.db")).migrate_if_needed() == 0
    assert store.get_bool(BACKEND_MIGRATION_DONE) is False


def test_echec_ne_pose_pas_le_drapeau(primary, store, fallback_path):
    """Une erreur de copie est journalisée, le drapeau reste à False pour réessayer."""
    def broken_factory(url):
        raise RuntimeError("fichier verrouillé")

    migrator = BackendMigrator(primary, store, fallback_path, fallback_engine_factory=broken_factory)

    assert migrator.migrate_if_needed() == 0
    assert store.get_bool(BACKEND_MIGRATION_DONE) is False


def test_ancienne_base_sans_colonne_photo(primary, store, tmp_path):
    """Colonne profile_pic absente de la base locale → copiée à NULL."""
    path = tmp_path / "legacy.db"
    legacy = ConnectionManager(BackendKind.FALLBACK, f"sqlite:///{path}")
    with legacy.transaction() as conn:
        conn.execute(text(
            "CREATE TABLE students (std_id INTEGER PRIMARY KEY, std_fname TEXT NOT NULL, "
            "std_mname TEXT, std_lname TEXT NOT NULL, std_gender TEXT NOT NULL, "
            "std_dob TEXT, std_class INTEGER)"
        ))
        for table_name in ["admin", "teachers", "student_attendance", "student_payments"]:
            Base.metadata.tables[table_name].create(conn)
        conn.execute(text(
            "INSERT INTO students (std_id, std_fname, std_lname, std_gender) VALUES (9, 'Old', 'Row', 'Male')"
        ))
    legacy.shutdown()

    assert BackendMigrator(primary, store, str(path)).migrate_if_needed() == 1
    with primary.session() as db:
        student = student_service.get_student(db, 9)
    assert student.first_name == "Old"
    assert student.has_profile_pic is False

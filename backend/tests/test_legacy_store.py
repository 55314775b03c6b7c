"""
Tests sur une base créée par les premières versions de l'application :
clés étrangères sans ON DELETE CASCADE, nom d'utilisateur admin non unique,
mots de passe hachés en BCrypt.
"""

import bcrypt
import pytest
from sqlalchemy import func, select, text

from schoolrecords.database import BackendKind, ConnectionManager
from schoolrecords.errors import InvalidCredentials
from schoolrecords.models.admin import Admin
from schoolrecords.models.assignment import TeacherAssignment
from schoolrecords.models.attendance import AttendanceRecord
from schoolrecords.models.payment import Payment
from schoolrecords.services import admin_service, student_service, subject_service, teacher_service
from schoolrecords.services.auth_service import AuthService
from schoolrecords.services.schema_service import ensure_schema

LEGACY_DDL = [
    """CREATE TABLE students (
        std_id integer PRIMARY KEY, std_fname text NOT NULL, std_mname text,
        std_lname text NOT NULL, std_gender text NOT NULL, std_dob text,
        std_class integer, profile_pic blob)""",
    """CREATE TABLE admin (
        adm_id integer PRIMARY KEY, adm_name text NOT NULL,
        adm_username text NOT NULL, password varchar(255) NOT NULL)""",
    """CREATE TABLE teachers (
        tch_id integer PRIMARY KEY, tch_name text NOT NULL, tch_contact text,
        tch_gender text NOT NULL, tch_email text, tch_address text, profile_pic blob)""",
    """CREATE TABLE subjects (subject_id integer PRIMARY KEY, subject_name text NOT NULL UNIQUE)""",
    """CREATE TABLE teacher_assignments (
        assignment_id integer PRIMARY KEY, teacher_id integer, subject_id integer,
        class_level integer,
        FOREIGN KEY(teacher_id) REFERENCES teachers(tch_id),
        FOREIGN KEY(subject_id) REFERENCES subjects(subject_id))""",
    """CREATE TABLE class_levels (class_id integer PRIMARY KEY, class_name text NOT NULL UNIQUE)""",
    """CREATE TABLE student_attendance (
        attendance_id integer PRIMARY KEY, student_id integer,
        attendance_date date NOT NULL, status text NOT NULL,
        FOREIGN KEY(student_id) REFERENCES students(std_id))""",
    """CREATE TABLE student_payments (
        payment_id integer PRIMARY KEY, student_id integer, amount_paid real NOT NULL,
        payment_date date NOT NULL, term text, academic_year integer,
        FOREIGN KEY(student_id) REFERENCES students(std_id))""",
]


@pytest.fixture
def legacy(tmp_path):
    """Base au schéma d'origine, puis ensure_schema comme au démarrage."""
    manager = ConnectionManager(BackendKind.FALLBACK, f"sqlite:///{tmp_path / 'legacy.db'}")
    with manager.transaction() as conn:
        for ddl in LEGACY_DDL:
            conn.execute(text(ddl))
        conn.execute(text(
            "INSERT INTO students (std_id, std_fname, std_lname, std_gender) VALUES (1, 'Amina', 'Diallo', 'Female')"
        ))
        conn.execute(text(
            "INSERT INTO student_attendance (student_id, attendance_date, status) VALUES (1, '2024-03-11', 'Present')"
        ))
        conn.execute(text(
            "INSERT INTO student_payments (student_id, amount_paid, payment_date) VALUES (1, 150.0, '2024-03-11')"
        ))
        conn.execute(text("INSERT INTO teachers (tch_id, tch_name, tch_gender) VALUES (1, 'Prof', 'Male')"))
        conn.execute(text("INSERT INTO subjects (subject_id, subject_name) VALUES (1, 'Maths')"))
        conn.execute(text(
            "INSERT INTO teacher_assignments (teacher_id, subject_id, class_level) VALUES (1, 1, 1)"
        ))
    ensure_schema(manager)
    yield manager
    manager.shutdown()


@pytest.fixture
def legacy_db(legacy):
    with legacy.session() as session:
        yield session


def count(db, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar()


# ============================================================
# Suppressions sans ON DELETE CASCADE
# ============================================================

def test_delete_student_supprime_presences_et_paiements(legacy_db):
    assert student_service.delete_student(legacy_db, 1) is True

    assert student_service.get_student(legacy_db, 1) is None
    assert count(legacy_db, AttendanceRecord) == 0
    assert count(legacy_db, Payment) == 0


def test_delete_teacher_supprime_ses_affectations(legacy_db):
    assert teacher_service.delete_teacher(legacy_db, 1) is True

    assert teacher_service.get_teacher(legacy_db, 1) is None
    assert count(legacy_db, TeacherAssignment) == 0


def test_delete_subject_supprime_ses_affectations(legacy_db):
    assert subject_service.delete_subject(legacy_db, 1) is True

    assert subject_service.get_subject(legacy_db, 1) is None
    assert count(legacy_db, TeacherAssignment) == 0


# ============================================================
# Comptes administrateur hérités
# ============================================================

def test_login_hash_bcrypt_puis_mise_a_niveau(legacy_db, hasher, store):
    """Un hash BCrypt existant permet la connexion et est remplacé par la méthode courante."""
    legacy_hash = bcrypt.hashpw(b"admin123", bcrypt.gensalt(rounds=4)).decode("utf-8")
    legacy_db.add(Admin(name="Admin", username="admin", password=legacy_hash))
    legacy_db.commit()
    auth = AuthService(store, hasher)

    assert auth.login(legacy_db, "admin", "admin123").username == "admin"

    stored = admin_service.get_admin_by_username(legacy_db, "admin").password
    assert stored.startswith(hasher.method + "$")
    assert auth.login(legacy_db, "admin", "admin123").username == "admin"


def test_login_hash_bcrypt_mauvais_mot_de_passe(legacy_db, hasher, store):
    legacy_hash = bcrypt.hashpw(b"admin123", bcrypt.gensalt(rounds=4)).decode("utf-8")
    legacy_db.add(Admin(name="Admin", username="admin", password=legacy_hash))
    legacy_db.commit()

    with pytest.raises(InvalidCredentials):
        AuthService(store, hasher).login(legacy_db, "admin", "faux")

    assert admin_service.get_admin_by_username(legacy_db, "admin").password == legacy_hash


def test_nom_utilisateur_en_double(legacy_db, hasher, store):
    """Deux lignes avec le même identifiant : la plus ancienne est utilisée, sans erreur."""
    legacy_db.add(Admin(id=10, name="Premier", username="admin", password=hasher.hash("un")))
    legacy_db.add(Admin(id=11, name="Second", username="admin", password=hasher.hash("deux")))
    legacy_db.commit()

    assert admin_service.get_admin_by_username(legacy_db, "admin").name == "Premier"
    assert AuthService(store, hasher).login(legacy_db, "admin", "un").name == "Premier"


def test_auto_login_nom_utilisateur_en_double(legacy_db, hasher, store):
    legacy_db.add(Admin(id=10, name="Premier", username="admin", password=hasher.hash("un")))
    legacy_db.add(Admin(id=11, name="Second", username="admin", password=hasher.hash("deux")))
    legacy_db.commit()
    AuthService(store, hasher).login(legacy_db, "admin", "un")

    restarted = AuthService(store, hasher)

    assert restarted.attempt_auto_login(legacy_db) is True
    assert restarted.current_admin.id == 10

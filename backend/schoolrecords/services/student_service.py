"""
Service métier pour les élèves : inscription, modification, recherche,
import en masse.
"""

import logging
from typing import Optional, Union

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schoolrecords.database import resync_identity
from schoolrecords.errors import ConstraintViolation, DuplicateKey
from schoolrecords.models.attendance import AttendanceRecord
from schoolrecords.models.payment import Payment
from schoolrecords.models.student import Student
from schoolrecords.schemas.student import (
    StudentCreate,
    StudentImportRow,
    StudentResponse,
    StudentSearchField,
    StudentUpdate,
)
from schoolrecords.services.search import contains_ignore_case, resolve_search_column

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = {
    StudentSearchField.ID: Student.id,
    StudentSearchField.FIRST_NAME: Student.first_name,
    StudentSearchField.LAST_NAME: Student.last_name,
}


def add_student(db: Session, data: StudentCreate, profile_pic: Optional[bytes] = None) -> StudentResponse:
    """Inscrit un nouvel élève ; l'identifiant est attribué par la base."""
    student = Student(**data.model_dump(mode="json"), profile_pic=profile_pic)
    db.add(student)
    db.commit()
    db.refresh(student)
    logger.info("Élève %s inscrit : %s %s", student.id, student.first_name, student.last_name)
    return StudentResponse.model_validate(student)


def add_students_batch(db: Session, rows: list[StudentImportRow]) -> int:
    """
    Insère N élèves en un seul executemany, identifiants d'origine compris.
    Une collision de clé annule tout le lot (DuplicateKey) : aucun élève n'est ajouté.
    """
    if not rows:
        return 0

    mappings = [{**row.model_dump(mode="json"), "profile_pic": row.profile_pic} for row in rows]
    try:
        db.execute(insert(Student), mappings)
        resync_identity(db.connection(), Student.__table__, "std_id")
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Import d'élèves annulé (%d lignes) : %s", len(rows), exc.orig)
        raise DuplicateKey("Un ou plusieurs identifiants d'élève existent déjà. Aucun élève n'a été importé.")

    logger.info("Import en masse : %d élèves insérés", len(rows))
    return len(rows)


def update_student(db: Session, student_id: int, data: StudentUpdate) -> Optional[StudentResponse]:
    """Met à jour les champs fournis d'un élève. Retourne None si introuvable."""
    student = db.get(Student, student_id)
    if student is None:
        return None

    for field, value in data.model_dump(exclude_unset=True, mode="json").items():
        setattr(student, field, value)

    db.commit()
    db.refresh(student)
    return StudentResponse.model_validate(student)


def set_student_photo(db: Session, student_id: int, profile_pic: Optional[bytes]) -> bool:
    student = db.get(Student, student_id)
    if student is None:
        return False
    student.profile_pic = profile_pic
    db.commit()
    return True


def delete_student(db: Session, student_id: int) -> bool:
    """
    Supprime un élève avec ses présences et paiements, dans une seule transaction.
    Les lignes dépendantes sont supprimées explicitement : les anciennes bases
    n'ont pas de ON DELETE CASCADE.
    Retourne True si supprimé, False si introuvable.
    """
    student = db.get(Student, student_id)
    if student is None:
        return False
    try:
        db.execute(delete(AttendanceRecord).where(AttendanceRecord.student_id == student_id))
        db.execute(delete(Payment).where(Payment.student_id == student_id))
        db.delete(student)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Suppression de l'élève %s annulée : %s", student_id, exc.orig)
        raise ConstraintViolation("Impossible de supprimer cet élève : des données y font encore référence.")
    logger.info("Élève %s supprimé", student_id)
    return True


def get_students(db: Session) -> list[StudentResponse]:
    """Retourne tous les élèves, triés par prénom puis nom."""
    students = db.execute(
        select(Student).order_by(Student.first_name, Student.last_name)
    ).scalars().all()
    return [StudentResponse.model_validate(s) for s in students]


def get_student(db: Session, student_id: int) -> Optional[StudentResponse]:
    student = db.get(Student, student_id)
    if student is None:
        return None
    return StudentResponse.model_validate(student)


def search_students(db: Session, term: str, option: Union[int, StudentSearchField]) -> list[StudentResponse]:
    """Recherche par identifiant, prénom ou nom (sous-chaîne, casse ignorée)."""
    column = resolve_search_column(SEARCH_COLUMNS, option, "élève")
    students = db.execute(
        select(Student)
        .where(contains_ignore_case(column, term))
        .order_by(Student.first_name, Student.last_name)
    ).scalars().all()
    return [StudentResponse.model_validate(s) for s in students]


def get_students_by_class(db: Session, class_id: int) -> list[StudentResponse]:
    students = db.execute(
        select(Student)
        .where(Student.class_id == class_id)
        .order_by(Student.last_name, Student.first_name)
    ).scalars().all()
    return [StudentResponse.model_validate(s) for s in students]

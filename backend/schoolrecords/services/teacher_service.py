"""
Service métier pour les enseignants.
"""

import logging
from typing import Optional, Union

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schoolrecords.database import resync_identity
from schoolrecords.errors import ConstraintViolation, DuplicateKey
from schoolrecords.models.assignment import TeacherAssignment
from schoolrecords.models.teacher import Teacher
from schoolrecords.schemas.teacher import (
    TeacherCreate,
    TeacherImportRow,
    TeacherResponse,
    TeacherSearchField,
    TeacherUpdate,
)
from schoolrecords.services.search import contains_ignore_case, resolve_search_column

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = {
    TeacherSearchField.ID: Teacher.id,
    TeacherSearchField.NAME: Teacher.name,
    TeacherSearchField.CONTACT: Teacher.contact,
    TeacherSearchField.EMAIL: Teacher.email,
    TeacherSearchField.ADDRESS: Teacher.address,
}


def add_teacher(db: Session, data: TeacherCreate, profile_pic: Optional[bytes] = None) -> TeacherResponse:
    teacher = Teacher(**data.model_dump(mode="json"), profile_pic=profile_pic)
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    logger.info("Enseignant %s ajouté : %s", teacher.id, teacher.name)
    return TeacherResponse.model_validate(teacher)


def add_teachers_batch(db: Session, rows: list[TeacherImportRow]) -> int:
    """Insertion en masse, tout ou rien (voir add_students_batch)."""
    if not rows:
        return 0

    mappings = [{**row.model_dump(mode="json"), "profile_pic": row.profile_pic} for row in rows]
    try:
        db.execute(insert(Teacher), mappings)
        resync_identity(db.connection(), Teacher.__table__, "tch_id")
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Import d'enseignants annulé (%d lignes) : %s", len(rows), exc.orig)
        raise DuplicateKey("Un ou plusieurs identifiants d'enseignant existent déjà. Aucun enseignant n'a été importé.")

    logger.info("Import en masse : %d enseignants insérés", len(rows))
    return len(rows)


def update_teacher(db: Session, teacher_id: int, data: TeacherUpdate) -> Optional[TeacherResponse]:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        return None

    for field, value in data.model_dump(exclude_unset=True, mode="json").items():
        setattr(teacher, field, value)

    db.commit()
    db.refresh(teacher)
    return TeacherResponse.model_validate(teacher)


def set_teacher_photo(db: Session, teacher_id: int, profile_pic: Optional[bytes]) -> bool:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        return False
    teacher.profile_pic = profile_pic
    db.commit()
    return True


def delete_teacher(db: Session, teacher_id: int) -> bool:
    """Supprime un enseignant et ses affectations, dans une seule transaction."""
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        return False
    try:
        db.execute(delete(TeacherAssignment).where(TeacherAssignment.teacher_id == teacher_id))
        db.delete(teacher)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Suppression de l'enseignant %s annulée : %s", teacher_id, exc.orig)
        raise ConstraintViolation("Impossible de supprimer cet enseignant : des données y font encore référence.")
    return True


def get_teachers(db: Session) -> list[TeacherResponse]:
    """Retourne tous les enseignants, triés par nom."""
    teachers = db.execute(select(Teacher).order_by(Teacher.name)).scalars().all()
    return [TeacherResponse.model_validate(t) for t in teachers]


def get_teacher(db: Session, teacher_id: int) -> Optional[TeacherResponse]:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        return None
    return TeacherResponse.model_validate(teacher)


def search_teachers(db: Session, term: str, option: Union[int, TeacherSearchField]) -> list[TeacherResponse]:
    column = resolve_search_column(SEARCH_COLUMNS, option, "enseignant")
    teachers = db.execute(
        select(Teacher)
        .where(contains_ignore_case(column, term))
        .order_by(Teacher.name)
    ).scalars().all()
    return [TeacherResponse.model_validate(t) for t in teachers]

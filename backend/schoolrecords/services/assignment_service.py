"""
Service métier pour les affectations enseignant / matière / classe.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schoolrecords.errors import ConstraintViolation
from schoolrecords.models.assignment import TeacherAssignment
from schoolrecords.models.subject import Subject
from schoolrecords.models.teacher import Teacher
from schoolrecords.schemas.assignment import AssignmentCreate, AssignmentResponse

logger = logging.getLogger(__name__)


def _assignment_query():
    return (
        select(
            TeacherAssignment.id,
            TeacherAssignment.teacher_id,
            Teacher.name.label("teacher_name"),
            TeacherAssignment.subject_id,
            Subject.name.label("subject_name"),
            TeacherAssignment.class_id,
        )
        .join(Teacher, Teacher.id == TeacherAssignment.teacher_id)
        .join(Subject, Subject.id == TeacherAssignment.subject_id)
    )


def _to_responses(rows) -> list[AssignmentResponse]:
    return [AssignmentResponse.model_validate(dict(row._mapping)) for row in rows]


def add_assignment(db: Session, data: AssignmentCreate) -> int:
    """
    Affecte un enseignant à une matière pour une classe.
    L'enseignant et la matière doivent exister. Retourne l'ID créé.
    """
    if db.get(Teacher, data.teacher_id) is None:
        raise ConstraintViolation("Enseignant introuvable.")
    if db.get(Subject, data.subject_id) is None:
        raise ConstraintViolation("Matière introuvable.")

    assignment = TeacherAssignment(
        teacher_id=data.teacher_id,
        subject_id=data.subject_id,
        class_id=data.class_id,
    )
    db.add(assignment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConstraintViolation("Affectation impossible : enseignant ou matière inexistant.")
    db.refresh(assignment)
    logger.info(
        "Enseignant %s affecté à la matière %s (classe %s)",
        data.teacher_id, data.subject_id, data.class_id,
    )
    return assignment.id


def delete_assignment(db: Session, assignment_id: int) -> bool:
    assignment = db.get(TeacherAssignment, assignment_id)
    if assignment is None:
        return False
    db.delete(assignment)
    db.commit()
    return True


def get_assignments(db: Session) -> list[AssignmentResponse]:
    """Toutes les affectations, triées par enseignant puis classe."""
    rows = db.execute(
        _assignment_query().order_by(Teacher.name, TeacherAssignment.class_id)
    ).all()
    return _to_responses(rows)


def get_assignments_for_teacher(db: Session, teacher_id: int) -> list[AssignmentResponse]:
    rows = db.execute(
        _assignment_query()
        .where(TeacherAssignment.teacher_id == teacher_id)
        .order_by(TeacherAssignment.class_id, Subject.name)
    ).all()
    return _to_responses(rows)


def get_assignments_for_class(db: Session, class_id: int) -> list[AssignmentResponse]:
    rows = db.execute(
        _assignment_query()
        .where(TeacherAssignment.class_id == class_id)
        .order_by(Subject.name)
    ).all()
    return _to_responses(rows)

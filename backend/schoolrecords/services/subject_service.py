"""
Service métier pour les matières.
"""

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schoolrecords.errors import ConstraintViolation, DuplicateKey
from schoolrecords.models.assignment import TeacherAssignment
from schoolrecords.models.subject import Subject
from schoolrecords.schemas.subject import SubjectCreate, SubjectResponse

logger = logging.getLogger(__name__)


def add_subject(db: Session, data: SubjectCreate) -> SubjectResponse:
    """Crée une matière. Lève DuplicateKey si le nom existe déjà."""
    subject = Subject(name=data.name)
    db.add(subject)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey(f"Une matière avec le nom '{data.name}' existe déjà.")
    db.refresh(subject)
    return SubjectResponse.model_validate(subject)


def update_subject(db: Session, subject_id: int, data: SubjectCreate) -> Optional[SubjectResponse]:
    subject = db.get(Subject, subject_id)
    if subject is None:
        return None

    subject.name = data.name
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey(f"Une matière avec le nom '{data.name}' existe déjà.")
    db.refresh(subject)
    return SubjectResponse.model_validate(subject)


def delete_subject(db: Session, subject_id: int) -> bool:
    """Supprime une matière et les affectations qui l'utilisent, dans une seule transaction."""
    subject = db.get(Subject, subject_id)
    if subject is None:
        return False
    try:
        db.execute(delete(TeacherAssignment).where(TeacherAssignment.subject_id == subject_id))
        db.delete(subject)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Suppression de la matière %s annulée : %s", subject_id, exc.orig)
        raise ConstraintViolation("Impossible de supprimer cette matière : des données y font encore référence.")
    return True


def get_subjects(db: Session) -> list[SubjectResponse]:
    """Retourne toutes les matières, triées par nom."""
    subjects = db.execute(select(Subject).order_by(Subject.name)).scalars().all()
    return [SubjectResponse.model_validate(s) for s in subjects]


def get_subject(db: Session, subject_id: int) -> Optional[SubjectResponse]:
    subject = db.get(Subject, subject_id)
    if subject is None:
        return None
    return SubjectResponse.model_validate(subject)

"""
Service métier pour la gestion des niveaux de classe.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schoolrecords.errors import DependencyConflict, DuplicateKey
from schoolrecords.models.assignment import TeacherAssignment
from schoolrecords.models.school_class import SchoolClass
from schoolrecords.models.student import Student
from schoolrecords.schemas.school_class import ClassCreate, ClassResponse

logger = logging.getLogger(__name__)


def create_class(db: Session, data: ClassCreate) -> ClassResponse:
    """
    Crée une nouvelle classe.
    Lève DuplicateKey si le nom existe déjà.
    """
    school_class = SchoolClass(name=data.name)
    db.add(school_class)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey(f"Une classe avec le nom '{data.name}' existe déjà.")
    db.refresh(school_class)
    return ClassResponse.model_validate(school_class)


def get_classes(db: Session) -> list[ClassResponse]:
    """Retourne toutes les classes, triées par nom."""
    classes = db.execute(
        select(SchoolClass).order_by(SchoolClass.name)
    ).scalars().all()
    return [ClassResponse.model_validate(c) for c in classes]


def get_class(db: Session, class_id: int) -> Optional[ClassResponse]:
    """Retourne une classe par son ID, ou None si inexistante."""
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        return None
    return ClassResponse.model_validate(school_class)


def get_class_name(db: Session, class_id: Optional[int]) -> Optional[str]:
    """Libellé d'une classe pour l'affichage, ou None si l'élève n'en a pas."""
    if class_id is None:
        return None
    return db.execute(
        select(SchoolClass.name).where(SchoolClass.id == class_id)
    ).scalar()


def update_class(db: Session, class_id: int, data: ClassCreate) -> Optional[ClassResponse]:
    """Renomme une classe."""
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        return None

    school_class.name = data.name
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateKey("Une classe avec ce nom existe déjà.")
    db.refresh(school_class)
    return ClassResponse.model_validate(school_class)


def count_students_in_class(db: Session, class_id: int) -> int:
    return db.execute(
        select(func.count())
        .select_from(Student)
        .where(Student.class_id == class_id)
    ).scalar() or 0


def count_assignments_for_class(db: Session, class_id: int) -> int:
    return db.execute(
        select(func.count())
        .select_from(TeacherAssignment)
        .where(TeacherAssignment.class_id == class_id)
    ).scalar() or 0


def delete_class(db: Session, class_id: int) -> bool:
    """
    Supprime une classe.
    Bloqué (DependencyConflict) tant que des élèves ou des affectations
    la référencent. Retourne True si supprimé, False si introuvable.
    """
    nb_students = count_students_in_class(db, class_id)
    if nb_students > 0:
        raise DependencyConflict(
            f"Impossible de supprimer cette classe : {nb_students} élève"
            f"{'s y sont inscrits' if nb_students > 1 else ' y est inscrit'}. "
            "Réaffectez-les d'abord.",
            count=nb_students,
            dependency="students",
        )

    nb_assignments = count_assignments_for_class(db, class_id)
    if nb_assignments > 0:
        raise DependencyConflict(
            f"Impossible de supprimer cette classe : elle est utilisée dans "
            f"{nb_assignments} affectation{'s' if nb_assignments > 1 else ''} d'enseignant. "
            "Supprimez d'abord ces affectations.",
            count=nb_assignments,
            dependency="teacher_assignments",
        )

    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        return False

    db.delete(school_class)
    db.commit()
    logger.info("Classe %s supprimée", class_id)
    return True

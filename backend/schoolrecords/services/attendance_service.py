"""
Service des présences journalières.

Enregistrer une liste de présences remplace, pour chaque (élève, date),
l'éventuel enregistrement précédent. Toute la liste passe dans une seule
transaction : si une ligne échoue, aucune présence de l'appel n'est modifiée.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from schoolrecords.errors import ConstraintViolation
from schoolrecords.models.attendance import AttendanceRecord
from schoolrecords.models.student import Student
from schoolrecords.schemas.attendance import AttendanceItem, AttendanceResponse

logger = logging.getLogger(__name__)


def save_attendance(db: Session, records: List[AttendanceItem]) -> int:
    """
    Pour chaque enregistrement :
    1. Supprime la présence existante du même élève à la même date
    2. Insère la nouvelle présence

    Commit unique en fin de liste ; rollback complet à la moindre erreur.
    Retourne le nombre de présences enregistrées.
    """
    if not records:
        return 0

    try:
        for record in records:
            db.execute(
                delete(AttendanceRecord).where(
                    AttendanceRecord.student_id == record.student_id,
                    AttendanceRecord.attendance_date == record.attendance_date,
                )
            )
            db.execute(
                insert(AttendanceRecord).values(
                    student_id=record.student_id,
                    attendance_date=record.attendance_date,
                    status=record.status.value,
                )
            )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Enregistrement des présences annulé : %s", exc.orig)
        raise ConstraintViolation(
            "Les présences n'ont pas été enregistrées : un élève de la liste est introuvable."
        )
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("%d présence(s) enregistrée(s)", len(records))
    return len(records)


def get_attendance_for_date(
    db: Session, attendance_date: date, class_id: Optional[int] = None
) -> list[AttendanceResponse]:
    """Présences d'une journée, éventuellement restreintes à une classe."""
    query = select(AttendanceRecord).where(AttendanceRecord.attendance_date == attendance_date)
    if class_id is not None:
        query = query.join(Student, Student.id == AttendanceRecord.student_id).where(
            Student.class_id == class_id
        )
    records = db.execute(query.order_by(AttendanceRecord.student_id)).scalars().all()
    return [AttendanceResponse.model_validate(r) for r in records]

"""
Service des paiements de frais de scolarité.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schoolrecords.errors import ConstraintViolation
from schoolrecords.models.payment import Payment
from schoolrecords.models.student import Student
from schoolrecords.schemas.payment import PaymentCreate, PaymentResponse

logger = logging.getLogger(__name__)


def add_payment(db: Session, data: PaymentCreate) -> PaymentResponse:
    """Enregistre un paiement. Le montant (≥ 0) est validé par le schéma."""
    if db.get(Student, data.student_id) is None:
        raise ConstraintViolation("Élève introuvable : paiement non enregistré.")

    payment = Payment(**data.model_dump())
    db.add(payment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConstraintViolation("Élève introuvable : paiement non enregistré.")
    db.refresh(payment)
    logger.info("Paiement de %.2f enregistré pour l'élève %s", payment.amount_paid, payment.student_id)
    return PaymentResponse.model_validate(payment)


def get_student_payments(db: Session, student_id: int) -> list[PaymentResponse]:
    """Paiements d'un élève, du plus récent au plus ancien."""
    payments = db.execute(
        select(Payment)
        .where(Payment.student_id == student_id)
        .order_by(Payment.payment_date.desc(), Payment.id.desc())
    ).scalars().all()
    return [PaymentResponse.model_validate(p) for p in payments]

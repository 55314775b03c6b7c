"""
Router pour les paiements de frais de scolarité.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolrecords.database import get_db
from schoolrecords.schemas.payment import PaymentCreate, PaymentResponse
from schoolrecords.services import payment_service

router = APIRouter(prefix="/api/v1/payments", tags=["Paiements"])


@router.post("", response_model=PaymentResponse, status_code=201, summary="Enregistrer un paiement")
def create_payment(data: PaymentCreate, db: Session = Depends(get_db)):
    try:
        return payment_service.add_payment(db, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get(
    "/students/{student_id}",
    response_model=List[PaymentResponse],
    summary="Historique des paiements d'un élève",
)
def list_student_payments(student_id: int, db: Session = Depends(get_db)):
    """Paiements du plus récent au plus ancien."""
    return payment_service.get_student_payments(db, student_id)

"""
Schémas Pydantic pour les paiements de frais de scolarité.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class PaymentCreate(BaseModel):
    student_id: int
    amount_paid: float = Field(ge=0)
    payment_date: date
    term: Optional[str] = None
    academic_year: Optional[int] = None


class PaymentResponse(BaseModel):
    id: int
    student_id: int
    amount_paid: float
    payment_date: date
    term: Optional[str]
    academic_year: Optional[int]

    model_config = {"from_attributes": True}

"""
Schémas Pydantic pour les affectations enseignant / matière / classe.
"""

from typing import Optional

from pydantic import BaseModel


class AssignmentCreate(BaseModel):
    teacher_id: int
    subject_id: int
    class_id: int


class AssignmentResponse(BaseModel):
    """Affectation enrichie des noms de l'enseignant et de la matière."""
    id: int
    teacher_id: int
    teacher_name: str
    subject_id: int
    subject_name: str
    class_id: Optional[int]

"""
Router pour les affectations enseignant / matière / classe.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolrecords.database import get_db
from schoolrecords.schemas.assignment import AssignmentCreate, AssignmentResponse
from schoolrecords.services import assignment_service

router = APIRouter(prefix="/api/v1/assignments", tags=["Affectations"])


@router.get("", response_model=List[AssignmentResponse], summary="Lister les affectations")
def list_assignments(teacher_id: Optional[int] = None, db: Session = Depends(get_db)):
    if teacher_id is not None:
        return assignment_service.get_assignments_for_teacher(db, teacher_id)
    return assignment_service.get_assignments(db)


@router.post("", status_code=201, summary="Créer une affectation")
def create_assignment(data: AssignmentCreate, db: Session = Depends(get_db)):
    """409 si l'enseignant ou la matière n'existe pas."""
    try:
        assignment_id = assignment_service.add_assignment(db, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"id": assignment_id}


@router.delete("/{assignment_id}", status_code=204, summary="Supprimer une affectation")
def delete_assignment(assignment_id: int, db: Session = Depends(get_db)):
    if not assignment_service.delete_assignment(db, assignment_id):
        raise HTTPException(status_code=404, detail="Affectation introuvable.")

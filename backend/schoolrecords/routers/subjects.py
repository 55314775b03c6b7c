"""
Router pour les matières.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolrecords.database import get_db
from schoolrecords.schemas.subject import SubjectCreate, SubjectResponse
from schoolrecords.services import subject_service

router = APIRouter(prefix="/api/v1/subjects", tags=["Matières"])


@router.get("", response_model=List[SubjectResponse], summary="Lister les matières")
def list_subjects(db: Session = Depends(get_db)):
    return subject_service.get_subjects(db)


@router.get("/{subject_id}", response_model=SubjectResponse, summary="Détail d'une matière")
def get_subject(subject_id: int, db: Session = Depends(get_db)):
    subject = subject_service.get_subject(db, subject_id)
    if subject is None:
        raise HTTPException(status_code=404, detail="Matière introuvable.")
    return subject


@router.post("", response_model=SubjectResponse, status_code=201, summary="Créer une matière")
def create_subject(data: SubjectCreate, db: Session = Depends(get_db)):
    try:
        return subject_service.add_subject(db, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{subject_id}", response_model=SubjectResponse, summary="Renommer une matière")
def update_subject(subject_id: int, data: SubjectCreate, db: Session = Depends(get_db)):
    try:
        subject = subject_service.update_subject(db, subject_id, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if subject is None:
        raise HTTPException(status_code=404, detail="Matière introuvable.")
    return subject


@router.delete("/{subject_id}", status_code=204, summary="Supprimer une matière")
def delete_subject(subject_id: int, db: Session = Depends(get_db)):
    """Les affectations qui utilisent la matière sont supprimées en cascade."""
    if not subject_service.delete_subject(db, subject_id):
        raise HTTPException(status_code=404, detail="Matière introuvable.")

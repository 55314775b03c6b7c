"""
Router pour les classes.
La suppression est refusée (409) tant que des élèves ou des affectations
référencent la classe ; le message indique combien.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolrecords.database import get_db
from schoolrecords.errors import DependencyConflict
from schoolrecords.schemas.assignment import AssignmentResponse
from schoolrecords.schemas.school_class import ClassCreate, ClassResponse
from schoolrecords.schemas.student import StudentResponse
from schoolrecords.services import assignment_service, class_service, student_service

router = APIRouter(prefix="/api/v1/classes", tags=["Classes"])


@router.get("", response_model=List[ClassResponse], summary="Lister les classes")
def list_classes(db: Session = Depends(get_db)):
    return class_service.get_classes(db)


@router.get("/{class_id}", response_model=ClassResponse, summary="Détail d'une classe")
def get_class(class_id: int, db: Session = Depends(get_db)):
    cls = class_service.get_class(db, class_id)
    if cls is None:
        raise HTTPException(status_code=404, detail="Classe introuvable.")
    return cls


@router.post("", response_model=ClassResponse, status_code=201, summary="Créer une classe")
def create_class(data: ClassCreate, db: Session = Depends(get_db)):
    try:
        return class_service.create_class(db, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{class_id}", response_model=ClassResponse, summary="Renommer une classe")
def update_class(class_id: int, data: ClassCreate, db: Session = Depends(get_db)):
    try:
        cls = class_service.update_class(db, class_id, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if cls is None:
        raise HTTPException(status_code=404, detail="Classe introuvable.")
    return cls


@router.delete("/{class_id}", status_code=204, summary="Supprimer une classe")
def delete_class(class_id: int, db: Session = Depends(get_db)):
    try:
        deleted = class_service.delete_class(db, class_id)
    except DependencyConflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Classe introuvable.")


@router.get("/{class_id}/students", response_model=List[StudentResponse], summary="Élèves d'une classe")
def list_class_students(class_id: int, db: Session = Depends(get_db)):
    return student_service.get_students_by_class(db, class_id)


@router.get(
    "/{class_id}/assignments",
    response_model=List[AssignmentResponse],
    summary="Affectations d'une classe",
)
def list_class_assignments(class_id: int, db: Session = Depends(get_db)):
    return assignment_service.get_assignments_for_class(db, class_id)

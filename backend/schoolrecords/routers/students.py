"""
Router pour les élèves.
Liste, recherche, inscription, modification, suppression, import en masse
et photo de profil (octets bruts, jamais en JSON).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from sqlalchemy.orm import Session

from schoolrecords.database import get_db
from schoolrecords.errors import DuplicateKey, InvalidArgument
from schoolrecords.schemas.student import StudentCreate, StudentImportRow, StudentResponse, StudentUpdate
from schoolrecords.services import student_service

router = APIRouter(prefix="/api/v1/students", tags=["Élèves"])

MAX_PHOTO_SIZE_MB = 2


@router.get("", response_model=List[StudentResponse], summary="Lister les élèves")
def list_students(class_id: Optional[int] = None, db: Session = Depends(get_db)):
    """Tous les élèves triés par prénom puis nom, ou ceux d'une classe."""
    if class_id is not None:
        return student_service.get_students_by_class(db, class_id)
    return student_service.get_students(db)


@router.get("/search", response_model=List[StudentResponse], summary="Rechercher des élèves")
def search_students(term: str, field: int = 0, db: Session = Depends(get_db)):
    """field : 0 = identifiant, 1 = prénom, 2 = nom."""
    try:
        return student_service.search_students(db, term, field)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{student_id}", response_model=StudentResponse, summary="Détail d'un élève")
def get_student(student_id: int, db: Session = Depends(get_db)):
    student = student_service.get_student(db, student_id)
    if student is None:
        raise HTTPException(status_code=404, detail="Élève introuvable.")
    return student


@router.post("", response_model=StudentResponse, status_code=201, summary="Inscrire un élève")
def create_student(data: StudentCreate, db: Session = Depends(get_db)):
    return student_service.add_student(db, data)


@router.post("/batch", status_code=201, summary="Import en masse d'élèves")
def import_students(rows: List[StudentImportRow], db: Session = Depends(get_db)):
    """Tout ou rien : un identifiant déjà pris rejette le lot entier (409)."""
    try:
        inserted = student_service.add_students_batch(db, rows)
    except DuplicateKey as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"inserted": inserted}


@router.put("/{student_id}", response_model=StudentResponse, summary="Modifier un élève")
def update_student(student_id: int, data: StudentUpdate, db: Session = Depends(get_db)):
    student = student_service.update_student(db, student_id, data)
    if student is None:
        raise HTTPException(status_code=404, detail="Élève introuvable.")
    return student


@router.delete("/{student_id}", status_code=204, summary="Supprimer un élève")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    """Supprime l'élève ; ses présences et paiements sont supprimés en cascade."""
    if not student_service.delete_student(db, student_id):
        raise HTTPException(status_code=404, detail="Élève introuvable.")


@router.get("/{student_id}/photo", summary="Photo de profil d'un élève")
def get_student_photo(student_id: int, db: Session = Depends(get_db)):
    student = student_service.get_student(db, student_id)
    if student is None or not student.profile_pic:
        raise HTTPException(status_code=404, detail="Photo introuvable.")
    return Response(content=student.profile_pic, media_type="application/octet-stream")


@router.put("/{student_id}/photo", status_code=204, summary="Remplacer la photo d'un élève")
async def upload_student_photo(student_id: int, file: UploadFile = File(...), db: Session = Depends(get_db)):
    content = await file.read()
    if len(content) > MAX_PHOTO_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"Image trop volumineuse. Taille maximale : {MAX_PHOTO_SIZE_MB} Mo.",
        )
    if not student_service.set_student_photo(db, student_id, content or None):
        raise HTTPException(status_code=404, detail="Élève introuvable.")

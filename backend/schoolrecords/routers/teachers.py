"""
Router pour les enseignants.
"""

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from sqlalchemy.orm import Session

from schoolrecords.database import get_db
from schoolrecords.errors import DuplicateKey, InvalidArgument
from schoolrecords.routers.students import MAX_PHOTO_SIZE_MB
from schoolrecords.schemas.teacher import TeacherCreate, TeacherImportRow, TeacherResponse, TeacherUpdate
from schoolrecords.services import teacher_service

router = APIRouter(prefix="/api/v1/teachers", tags=["Enseignants"])


@router.get("", response_model=List[TeacherResponse], summary="Lister les enseignants")
def list_teachers(db: Session = Depends(get_db)):
    return teacher_service.get_teachers(db)


@router.get("/search", response_model=List[TeacherResponse], summary="Rechercher des enseignants")
def search_teachers(term: str, field: int = 0, db: Session = Depends(get_db)):
    """field : 0 = identifiant, 1 = nom, 2 = contact, 3 = email, 4 = adresse."""
    try:
        return teacher_service.search_teachers(db, term, field)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{teacher_id}", response_model=TeacherResponse, summary="Détail d'un enseignant")
def get_teacher(teacher_id: int, db: Session = Depends(get_db)):
    teacher = teacher_service.get_teacher(db, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=404, detail="Enseignant introuvable.")
    return teacher


@router.post("", response_model=TeacherResponse, status_code=201, summary="Ajouter un enseignant")
def create_teacher(data: TeacherCreate, db: Session = Depends(get_db)):
    return teacher_service.add_teacher(db, data)


@router.post("/batch", status_code=201, summary="Import en masse d'enseignants")
def import_teachers(rows: List[TeacherImportRow], db: Session = Depends(get_db)):
    try:
        inserted = teacher_service.add_teachers_batch(db, rows)
    except DuplicateKey as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"inserted": inserted}


@router.put("/{teacher_id}", response_model=TeacherResponse, summary="Modifier un enseignant")
def update_teacher(teacher_id: int, data: TeacherUpdate, db: Session = Depends(get_db)):
    teacher = teacher_service.update_teacher(db, teacher_id, data)
    if teacher is None:
        raise HTTPException(status_code=404, detail="Enseignant introuvable.")
    return teacher


@router.delete("/{teacher_id}", status_code=204, summary="Supprimer un enseignant")
def delete_teacher(teacher_id: int, db: Session = Depends(get_db)):
    if not teacher_service.delete_teacher(db, teacher_id):
        raise HTTPException(status_code=404, detail="Enseignant introuvable.")


@router.get("/{teacher_id}/photo", summary="Photo de profil d'un enseignant")
def get_teacher_photo(teacher_id: int, db: Session = Depends(get_db)):
    teacher = teacher_service.get_teacher(db, teacher_id)
    if teacher is None or not teacher.profile_pic:
        raise HTTPException(status_code=404, detail="Photo introuvable.")
    return Response(content=teacher.profile_pic, media_type="application/octet-stream")


@router.put("/{teacher_id}/photo", status_code=204, summary="Remplacer la photo d'un enseignant")
async def upload_teacher_photo(teacher_id: int, file: UploadFile = File(...), db: Session = Depends(get_db)):
    content = await file.read()
    if len(content) > MAX_PHOTO_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"Image trop volumineuse. Taille maximale : {MAX_PHOTO_SIZE_MB} Mo.",
        )
    if not teacher_service.set_teacher_photo(db, teacher_id, content or None):
        raise HTTPException(status_code=404, detail="Enseignant introuvable.")

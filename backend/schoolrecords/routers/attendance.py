"""
Router pour les présences.
L'enregistrement remplace la présence existante (élève, date) et le lot
entier est appliqué ou aucun.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from schoolrecords.database import get_db
from schoolrecords.schemas.attendance import AttendanceResponse, AttendanceSaveRequest, AttendanceSaveResult
from schoolrecords.services import attendance_service

router = APIRouter(prefix="/api/v1/attendance", tags=["Présences"])


@router.post("", response_model=AttendanceSaveResult, summary="Enregistrer les présences")
def save_attendance(data: AttendanceSaveRequest, db: Session = Depends(get_db)):
    try:
        saved = attendance_service.save_attendance(db, data.records)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return AttendanceSaveResult(saved=saved)


@router.get("", response_model=List[AttendanceResponse], summary="Présences d'une date")
def get_attendance(attendance_date: date, class_id: Optional[int] = None, db: Session = Depends(get_db)):
    return attendance_service.get_attendance_for_date(db, attendance_date, class_id)

"""
Schémas Pydantic pour les présences journalières.
"""

import enum
from datetime import date
from typing import List

from pydantic import BaseModel


class AttendanceStatus(str, enum.Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"


class AttendanceItem(BaseModel):
    student_id: int
    attendance_date: date
    status: AttendanceStatus


class AttendanceSaveRequest(BaseModel):
    """Corps de requête : la liste entière est enregistrée en une transaction."""
    records: List[AttendanceItem]


class AttendanceResponse(BaseModel):
    id: int
    student_id: int
    attendance_date: date
    status: str

    model_config = {"from_attributes": True}


class AttendanceSaveResult(BaseModel):
    saved: int

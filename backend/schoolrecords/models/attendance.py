"""
Modèle SQLAlchemy pour les présences journalières.
Identité fonctionnelle : (student_id, attendance_date) : un enregistrement
remplace le précédent pour le même élève et le même jour.
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, String

from schoolrecords.database import Base


class AttendanceRecord(Base):
    __tablename__ = "student_attendance"

    id = Column("attendance_id", Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("students.std_id", ondelete="CASCADE"), nullable=True)
    attendance_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False)  # Present, Absent, Late

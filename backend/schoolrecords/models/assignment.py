"""
Modèle SQLAlchemy pour les affectations : « cet enseignant enseigne cette
matière à cette classe ». Aucune contrainte d'unicité sur le triplet.
"""

from sqlalchemy import Column, ForeignKey, Integer

from schoolrecords.database import Base


class TeacherAssignment(Base):
    __tablename__ = "teacher_assignments"

    id = Column("assignment_id", Integer, primary_key=True)
    teacher_id = Column(Integer, ForeignKey("teachers.tch_id", ondelete="CASCADE"), nullable=True)
    subject_id = Column(Integer, ForeignKey("subjects.subject_id", ondelete="CASCADE"), nullable=True)
    class_id = Column("class_level", Integer, nullable=True)  # class_levels.class_id

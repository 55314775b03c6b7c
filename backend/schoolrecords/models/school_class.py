"""
Modèle SQLAlchemy pour les niveaux de classe (ex. « JHS 1 »).
Nommé school_class pour éviter le conflit avec le mot-clé Python 'class'.
"""

from sqlalchemy import Column, Integer, String

from schoolrecords.database import Base


class SchoolClass(Base):
    __tablename__ = "class_levels"

    id = Column("class_id", Integer, primary_key=True)
    name = Column("class_name", String(150), unique=True, nullable=False)

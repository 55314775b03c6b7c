"""
Modèle SQLAlchemy pour la table teachers.
"""

from sqlalchemy import Column, Integer, LargeBinary, Text

from schoolrecords.database import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column("tch_id", Integer, primary_key=True)
    name = Column("tch_name", Text, nullable=False)
    contact = Column("tch_contact", Text, nullable=True)
    gender = Column("tch_gender", Text, nullable=False)
    email = Column("tch_email", Text, nullable=True)
    address = Column("tch_address", Text, nullable=True)
    profile_pic = Column("profile_pic", LargeBinary, nullable=True)

"""
Modèle SQLAlchemy pour la table students.
Les noms de colonnes physiques (std_*) sont ceux des installations existantes.
"""

from sqlalchemy import Column, Integer, LargeBinary, Text

from schoolrecords.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column("std_id", Integer, primary_key=True)
    first_name = Column("std_fname", Text, nullable=False)
    middle_name = Column("std_mname", Text, nullable=True)
    last_name = Column("std_lname", Text, nullable=False)
    gender = Column("std_gender", Text, nullable=False)      # Male, Female
    date_of_birth = Column("std_dob", Text, nullable=True)   # date au format texte
    class_id = Column("std_class", Integer, nullable=True)   # class_levels.class_id, sans FK (migration)
    profile_pic = Column("profile_pic", LargeBinary, nullable=True)

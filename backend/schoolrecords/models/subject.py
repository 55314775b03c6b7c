from sqlalchemy import Column, Integer, String

from schoolrecords.database import Base


class Subject(Base):
    __tablename__ = "subjects"

    id = Column("subject_id", Integer, primary_key=True)
    name = Column("subject_name", String(150), unique=True, nullable=False)

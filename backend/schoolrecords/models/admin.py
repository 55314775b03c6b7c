"""
Modèle SQLAlchemy pour les administrateurs.
Le mot de passe n'est stocké que sous forme de hash salé (werkzeug).
"""

from sqlalchemy import Column, Integer, String, Text

from schoolrecords.database import Base


class Admin(Base):
    __tablename__ = "admin"

    id = Column("adm_id", Integer, primary_key=True)
    name = Column("adm_name", Text, nullable=False)
    username = Column("adm_username", String(150), unique=True, nullable=False)
    password = Column("password", String(255), nullable=False)

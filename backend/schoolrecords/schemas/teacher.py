"""
Schémas Pydantic pour les enseignants.
"""

import enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from schoolrecords.schemas.student import Gender


class TeacherSearchField(enum.IntEnum):
    ID = 0
    NAME = 1
    CONTACT = 2
    EMAIL = 3
    ADDRESS = 4


class TeacherCreate(BaseModel):
    name: str
    contact: Optional[str] = None
    gender: Gender
    email: Optional[str] = None
    address: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de l'enseignant ne peut pas être vide.")
        return v.strip()


class TeacherUpdate(BaseModel):
    name: Optional[str] = None
    contact: Optional[str] = None
    gender: Optional[Gender] = None
    email: Optional[str] = None
    address: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom de l'enseignant ne peut pas être vide.")
        return v.strip() if v else v


class TeacherImportRow(TeacherCreate):
    """Ligne d'import en masse : l'identifiant d'origine est conservé."""
    id: int
    profile_pic: Optional[bytes] = Field(default=None, exclude=True)


class TeacherResponse(BaseModel):
    id: int
    name: str
    contact: Optional[str]
    gender: str
    email: Optional[str]
    address: Optional[str]
    profile_pic: Optional[bytes] = Field(default=None, exclude=True)

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def has_profile_pic(self) -> bool:
        return bool(self.profile_pic)

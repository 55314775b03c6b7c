"""
Schémas Pydantic pour les élèves.
"""

import enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator


class Gender(str, enum.Enum):
    MALE = "Male"
    FEMALE = "Female"


class StudentSearchField(enum.IntEnum):
    """Critères de recherche proposés à l'écran, dans l'ordre d'affichage."""
    ID = 0
    FIRST_NAME = 1
    LAST_NAME = 2


def _strip_required(v: str) -> str:
    if not v.strip():
        raise ValueError("Le champ ne peut pas être vide.")
    return v.strip()


class StudentCreate(BaseModel):
    """Schéma d'inscription d'un élève."""
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    gender: Gender
    date_of_birth: Optional[str] = None
    class_id: Optional[int] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _strip_required(v)


class StudentUpdate(BaseModel):
    """Schéma de mise à jour : seuls les champs fournis sont modifiés."""
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[str] = None
    class_id: Optional[int] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip() if v else v


class StudentImportRow(StudentCreate):
    """Ligne d'import en masse : l'identifiant d'origine est conservé."""
    id: int
    profile_pic: Optional[bytes] = Field(default=None, exclude=True)


class StudentResponse(BaseModel):
    """Copie d'un élève renvoyée à l'appelant. La photo n'est jamais sérialisée en JSON."""
    id: int
    first_name: str
    middle_name: Optional[str]
    last_name: str
    gender: str
    date_of_birth: Optional[str]
    class_id: Optional[int]
    profile_pic: Optional[bytes] = Field(default=None, exclude=True)

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def has_profile_pic(self) -> bool:
        return bool(self.profile_pic)

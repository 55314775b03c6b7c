from pydantic import BaseModel, field_validator


class SubjectCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de la matière ne peut pas être vide.")
        return v.strip()


class SubjectResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}

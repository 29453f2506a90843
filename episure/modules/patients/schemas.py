from datetime import date, datetime
from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

class PatientCreate(BaseModel):
    case_id: str = Field(..., min_length=1, max_length=255)  # case to link the patient to
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    date_of_birth: date
    allergies_medical_history: str | None = None
    is_self: bool | None = None
    invite_email: EmailStr | None = None
    location: str = Field(..., min_length=1, max_length=255)
    postal_code: str = Field(..., min_length=1, max_length=20)

    @field_validator("first_name", "last_name")
    @classmethod
    def _name_len(cls, v: str):
        if len(v.strip()) < 2:
            raise ValueError("must be at least 2 characters")
        return v

class PatientOut(BaseModel):
    patient_id: int = Field(validation_alias=AliasChoices("id", "patient_id"))
    user_id: int
    first_name: str
    last_name: str
    date_of_birth: date
    allergies_medical_history: str | None
    is_self: bool
    invite_email: str | None
    location: str
    postal_code: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    workflow_state: str | None = None

    class Config:
        from_attributes = True

import re
from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

E164 = re.compile(r"^\+?[1-9]\d{9,14}$")

class EmergencyContactIn(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    phone_number: str = Field(..., max_length=20)
    send_invite: bool = False

    @field_validator("first_name", "last_name")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.lower()

    @field_validator("phone_number")
    @classmethod
    def _e164(cls, v: str) -> str:
        v = v.strip()
        if not E164.match(v):
            raise ValueError("phone_number must be in E.164 format, e.g. +14155550123")
        return v

class EmergencyContactsRequest(BaseModel):
    contacts: list[EmergencyContactIn] = Field(..., min_length=1)

class EmergencyContactOut(BaseModel):
    contact_id: int = Field(validation_alias=AliasChoices("id", "contact_id"))
    first_name: str
    last_name: str
    email: str
    phone_number: str
    invite_sent: bool

    class Config:
        from_attributes = True

class SkippedContact(BaseModel):
    email: str
    reason: str

class EmergencyContactsResult(BaseModel):
    case_id: str
    saved: list[EmergencyContactOut]
    skipped: list[SkippedContact] = []
    workflow_state: str
    message: str

from typing import Literal
from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

class UserCreate(BaseModel):
    entra_oid: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = Field(default=None, max_length=20)
    account_status: Literal["incomplete", "complete"] = "incomplete"

    @field_validator("email")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.lower()

class UserStatusUpdate(BaseModel):
    account_status: Literal["incomplete", "complete"]

class UserOut(BaseModel):
    user_id: int = Field(validation_alias=AliasChoices("id", "user_id"))
    entra_oid: str | None
    email: str
    first_name: str
    last_name: str
    account_status: str
    first_login_completed: bool

    class Config:
        from_attributes = True

class ProfileOut(BaseModel):
    userId: int
    firstName: str
    lastName: str
    email: str

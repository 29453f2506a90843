from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, field_validator

class CaseCreate(BaseModel):
    case_id: str = Field(..., min_length=1, max_length=255)
    case_name: str = Field(..., max_length=255)
    battery_level: int | None = Field(default=None, ge=0, le=100)
    connection_status: str | None = Field(default=None, max_length=50)

    @field_validator("case_id")
    @classmethod
    def _case_id_not_blank(cls, v: str):
        if not v.strip():
            raise ValueError("Case ID is required")
        return v.strip()

    @field_validator("case_name")
    @classmethod
    def _case_name_len(cls, v: str):
        if len(v.strip()) < 2:
            raise ValueError("Case name must be at least 2 characters")
        return v

class CaseOut(BaseModel):
    case_id: str
    patient_id: int | None
    case_name: str
    battery_level: int | None
    last_seen: datetime | None
    connection_status: str | None
    workflow_state: str | None = Field(validation_alias=AliasChoices("current_step", "workflow_state"))

    class Config:
        from_attributes = True

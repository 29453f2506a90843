from datetime import date, datetime
from typing import Literal
from pydantic import AliasChoices, BaseModel, Field

class MedicationUpsert(BaseModel):
    case_id: str = Field(..., min_length=1, max_length=255)
    spray_number: Literal[1, 2]
    expiration_date_spray_1: date
    lot_number_spray_1: str | None = Field(default=None, max_length=50)
    expiration_date_spray_2: date
    lot_number_spray_2: str | None = Field(default=None, max_length=50)
    dosage_details: str | None = Field(default=None, max_length=500)

class MedicationOut(BaseModel):
    spray_id: int = Field(validation_alias=AliasChoices("id", "spray_id"))
    case_id: int
    spray_number: int
    status: str
    expiration_date_spray_1: date
    lot_number_spray_1: str | None
    expiration_date_spray_2: date
    lot_number_spray_2: str | None
    dosage_details: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    workflow_state: str | None = None

    class Config:
        from_attributes = True

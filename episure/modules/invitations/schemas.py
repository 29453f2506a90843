from pydantic import AliasChoices, BaseModel, EmailStr, Field, model_validator

class InviteMemberRequest(BaseModel):
    """Either ``email`` (single form) or ``emails`` (batch form)."""
    case_id: str = Field(..., min_length=1, max_length=255)
    email: EmailStr | None = None
    emails: list[EmailStr] | None = Field(default=None, max_length=50)

    @model_validator(mode="after")
    def _one_form(self):
        if self.email is None and not self.emails:
            raise ValueError("Either email or emails is required")
        if self.email is not None and self.emails:
            raise ValueError("Send either email or emails, not both")
        return self

    @property
    def addresses(self) -> list[str]:
        raw = [self.email] if self.email is not None else list(self.emails or [])
        return list(dict.fromkeys(e.lower() for e in raw))

class InvitedUserOut(BaseModel):
    invite_id: int = Field(validation_alias=AliasChoices("id", "invite_id"))
    email: str
    user_id: int | None = None

    class Config:
        from_attributes = True

class SkippedInvite(BaseModel):
    email: str
    reason: str

class InviteResult(BaseModel):
    case_id: str
    created: list[InvitedUserOut]
    skipped: list[SkippedInvite] = []

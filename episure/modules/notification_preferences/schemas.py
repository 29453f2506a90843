from typing import Literal
from pydantic import AliasChoices, BaseModel, Field, model_validator

DeliveryMethod = Literal["email", "sms", "push", "in_app"]

class NotificationPreferenceIn(BaseModel):
    """One case's settings, applied to every notification type.

    Older clients send a single ``delivery_method``; newer ones send
    ``delivery_methods``. Both collapse into ``channels``, which is all the
    service reads.
    """
    case_id: str = Field(..., min_length=1, max_length=255)
    enabled: bool
    delivery_method: DeliveryMethod | None = None
    delivery_methods: list[DeliveryMethod] | None = None
    alert_schedule: str | None = None  # accepted for older clients; no longer stored

    @property
    def channels(self) -> list[str]:
        if self.delivery_methods is not None:
            return list(dict.fromkeys(self.delivery_methods))
        if self.delivery_method:
            return [self.delivery_method]
        return []

    @model_validator(mode="after")
    def _channel_required_when_enabled(self):
        if self.enabled and not self.channels:
            raise ValueError("At least one delivery method is required when notification is enabled")
        return self

class NotificationPreferencesRequest(BaseModel):
    notification_preferences: list[NotificationPreferenceIn] = Field(..., min_length=1, max_length=7)

class NotificationPreferencesResult(BaseModel):
    message: str
    workflow_state: str
    created: int = 0
    updated: int = 0
    case_ids: list[str] = []

class NotificationPreferenceOut(BaseModel):
    notification_pref_id: int = Field(validation_alias=AliasChoices("id", "notification_pref_id"))
    case_id: int
    user_id: int
    type: str
    delivery_method: str | None
    enabled: bool

    class Config:
        from_attributes = True

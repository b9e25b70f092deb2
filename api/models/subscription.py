"""Push subscription model definitions."""
from typing import Optional
from pydantic import BaseModel, Field, field_validator

_BASE64URL_CHARS = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_=")


class SubscriptionKeys(BaseModel):
    """Client encryption keys from the browser's PushSubscription."""
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)

    @field_validator("p256dh", "auth")
    @classmethod
    def validate_base64url(cls, v: str) -> str:
        """Keys are base64url encoded."""
        if not set(v) <= _BASE64URL_CHARS:
            raise ValueError("Key must be base64url encoded")
        return v


class PushSubscription(BaseModel):
    """A browser push endpoint plus its encryption keys."""
    endpoint: str
    expiration_time: Optional[float] = Field(default=None, alias="expirationTime")
    keys: SubscriptionKeys

    class Config:
        populate_by_name = True

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Push services are only reachable over https."""
        if not v.startswith("https://"):
            raise ValueError("Endpoint must start with https://")
        return v

    def to_subscription_info(self) -> dict:
        """Shape expected by the web-push library."""
        return {"endpoint": self.endpoint, "keys": {"p256dh": self.keys.p256dh, "auth": self.keys.auth}}

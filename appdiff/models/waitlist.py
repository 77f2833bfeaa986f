"""Waitlist signup models."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, EmailStr, Field


class WaitlistEntry(BaseModel):
    """A row inserted into the waitlist table."""

    email: EmailStr
    ip_address: str = Field(default="unknown", description="Client address as reported by the proxy")
    referral_source: str | None = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class WaitlistResult(BaseModel):
    """Outcome shown to the person signing up."""

    success: bool
    message: str
    already_subscribed: bool = False

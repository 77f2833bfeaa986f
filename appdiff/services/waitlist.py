"""
Waitlist Service.

Validates and records landing-page signups. A repeated email is reported as a
successful signup.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import DuplicateEntryError, StoreError
from ..core.logging import get_logger
from ..models.waitlist import WaitlistEntry, WaitlistResult
from ..storage import VersionStore

logger = get_logger(__name__)

INVALID_EMAIL = "Please enter a valid email address"
SUBSCRIBED = "Thanks for joining our waitlist! We'll keep you updated."
ALREADY_SUBSCRIBED = "You're already on our waitlist! We'll be in touch soon."
SUBMISSION_FAILED = "Something went wrong. Please try again later."


class WaitlistService:
    """Service for waitlist signups."""

    def __init__(self, store: VersionStore) -> None:
        self.store = store

    async def subscribe(
        self,
        email: str,
        ip_address: str | None = None,
        referral_source: str | None = None,
    ) -> WaitlistResult:
        """Add an email to the waitlist.

        Args:
            email: Address entered in the signup form.
            ip_address: Client address (first ``X-Forwarded-For`` hop), if known.
            referral_source: Where the visitor came from, if provided.

        Returns:
            The message to show; never raises for invalid input or store errors.
        """
        try:
            entry = WaitlistEntry(
                email=(email or "").strip(),
                ip_address=ip_address or "unknown",
                referral_source=referral_source or None,
            )
        except PydanticValidationError:
            logger.info("waitlist_email_rejected")
            return WaitlistResult(success=False, message=INVALID_EMAIL)

        try:
            await self.store.insert_waitlist(entry)
        except DuplicateEntryError:
            logger.info("waitlist_duplicate", referral_source=entry.referral_source)
            return WaitlistResult(success=True, message=ALREADY_SUBSCRIBED, already_subscribed=True)
        except StoreError as e:
            logger.error("waitlist_insert_failed", error=str(e))
            return WaitlistResult(success=False, message=SUBMISSION_FAILED)

        logger.info("waitlist_subscribed", referral_source=entry.referral_source)
        return WaitlistResult(success=True, message=SUBSCRIBED)

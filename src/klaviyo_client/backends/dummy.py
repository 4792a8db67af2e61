"""Dummy Klaviyo backend."""

import logging

from klaviyo_client.backends import KlaviyoResult
from klaviyo_client.errors import ErrorKind

from .base import BaseBackend

logger = logging.getLogger(__name__)


class DummyBackend(BaseBackend):
    """Dummy Klaviyo backend doing no request, only checking required identifiers."""

    def __init__(self, **kwargs):
        """Accept and ignore the parameters of the real backend."""

    def track(self, event, *, profile_id=None, email=None, properties=None, customer_properties=None, time=None):
        """Track an event."""
        if not email and not profile_id:
            logger.error("Klaviyo dummy backend: track %r without email or ID", event)
            return KlaviyoResult.failure(ErrorKind.MISSING_IDENTIFIER)
        return KlaviyoResult(ok=True, status_code=202)

    def identify(self, base_attributes, custom_properties=None, **kwargs):
        """Create or update a profile."""
        if not base_attributes.get("email"):
            logger.error("Klaviyo dummy backend: identify without email")
            return KlaviyoResult.failure(ErrorKind.MISSING_IDENTIFIER)
        return KlaviyoResult(ok=True, status_code=200)

    def lists(self):
        """Retrieve the lists of the account."""
        return KlaviyoResult(ok=True, status_code=200, data={"data": []})

    def add_to_list(self, email, list_id):
        """Subscribe an email to a list."""
        return KlaviyoResult(ok=True, status_code=202)

    def add_to_sms_list(self, phone, email, list_id):
        """Subscribe a phone number to a list."""
        return KlaviyoResult(ok=True, status_code=202)

    def get_profile(self, profile_id):
        """Retrieve a profile."""
        return KlaviyoResult(ok=True, status_code=200, data={"data": {"type": "profile", "id": profile_id}})

    def update_profile(self, profile_id, properties):
        """Update the attributes of a profile."""
        return KlaviyoResult(ok=True, status_code=200)

"""Klaviyo backend base module."""

from abc import ABC, abstractmethod
from datetime import datetime

from klaviyo_client.backends import KlaviyoResult

TRACK_ONCE_PROPERTY = "__track_once__"


class BaseBackend(ABC):
    """Base class for all Klaviyo backends."""

    @abstractmethod
    def track(
        self,
        event: str,
        *,
        profile_id: str | None = None,
        email: str | None = None,
        properties: dict | None = None,
        customer_properties: dict | None = None,
        time: datetime | None = None,
    ) -> KlaviyoResult:
        """
        Track an event against a profile.

        Args:
            event: Name of the metric
            profile_id: Klaviyo id of the profile
            email: Email of the profile
            properties: Event properties, a `value` key sets the event value
            customer_properties: Profile attributes sent along the event
            time: When the event happened

        Returns:
            KlaviyoResult: falsy when neither `profile_id` nor `email` is given

        """

    def track_once(self, event: str, **kwargs) -> KlaviyoResult:
        """Track an event the API must only record once per profile."""
        kwargs["properties"] = {**(kwargs.get("properties") or {}), TRACK_ONCE_PROPERTY: True}
        return self.track(event, **kwargs)

    @abstractmethod
    def identify(self, base_attributes: dict, custom_properties: dict | None = None) -> KlaviyoResult:
        """
        Create or update a profile.

        Args:
            base_attributes: Profile attributes, `email` is required
            custom_properties: Custom profile properties

        Returns:
            KlaviyoResult: falsy when `email` is missing

        """

    @abstractmethod
    def lists(self) -> KlaviyoResult:
        """Retrieve the lists of the account."""

    @abstractmethod
    def add_to_list(self, email: str, list_id: str) -> KlaviyoResult:
        """Subscribe an email to a list."""

    @abstractmethod
    def add_to_sms_list(self, phone: str, email: str, list_id: str) -> KlaviyoResult:
        """Subscribe a phone number to a list with SMS marketing consent."""

    @abstractmethod
    def get_profile(self, profile_id: str) -> KlaviyoResult:
        """Retrieve a profile."""

    @abstractmethod
    def update_profile(self, profile_id: str, properties: dict) -> KlaviyoResult:
        """Update the attributes of a profile."""

"""Klaviyo marketing automation integration."""

import logging
from datetime import UTC, datetime

import requests
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

from klaviyo_client.backends import KlaviyoResult
from klaviyo_client.errors import ErrorKind, classify_profile_import_errors, parse_errors

from .base import BaseBackend

DEFAULT_BASE_URL = "https://a.klaviyo.com/"
DEFAULT_REVISION = "2024-02-15"
EVENT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

PROFILE_BASE_ATTRIBUTES = (
    "email",
    "phone_number",
    "external_id",
    "first_name",
    "last_name",
    "organization",
    "title",
    "image",
    "location",
)

# Custom property flagging a profile resubmitted without its phone number
PHONE_RETRY_MARKERS = {
    ErrorKind.DUPLICATE_PROFILE: "duplicate_phone_number",
    ErrorKind.INVALID_PHONE_NUMBER: "invalid_phone_number",
}


def format_event_time(value: datetime) -> str:
    """Format an event time, naive datetimes being considered as UTC."""
    if timezone.is_naive(value):
        value = timezone.make_aware(value, UTC)
    return value.strftime(EVENT_TIME_FORMAT)


def _decode_body(response: requests.Response) -> dict | None:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


class KlaviyoBackend(BaseBackend):
    """
    Klaviyo marketing automation integration.

    Handles:
    - Event tracking against profiles
    - Profile creation, retrieval and update
    - List subscriptions, by email or with SMS consent

    Every call is a single best effort request. Failures are logged and returned
    as falsy `KlaviyoResult`, they are never raised.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = 10,
        revision: str = DEFAULT_REVISION,
        logger: logging.Logger | None = None,
    ):
        """Configure the Klaviyo backend."""
        if not api_key:
            raise ImproperlyConfigured(f"Could not instantiate {self.__class__.__name__}, api_key is missing.")
        self._api_key = api_key
        self.base_url = f"{base_url.rstrip('/')}/"
        self.timeout = timeout
        self.revision = revision
        self.logger = logger or logging.getLogger(__name__)

    def _headers(self, with_body: bool) -> dict:
        headers = {
            "Accept": "application/json",
            "revision": self.revision,
            "Authorization": f"Klaviyo-API-Key {self._api_key}",
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        expected_status: tuple[int, ...],
        payload: dict | None = None,
    ) -> KlaviyoResult:
        """Send one request to the API and wrap its response in a result."""
        try:
            response = requests.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                headers=self._headers(with_body=payload is not None),
                timeout=self.timeout,
            )
        except requests.RequestException as err:
            self.logger.error("Klaviyo API called: %s %s, data: %r, error: %s", operation, path, payload, err)
            return KlaviyoResult.failure(ErrorKind.TRANSPORT_ERROR)

        if response.status_code in expected_status:
            self.logger.debug("Klaviyo API called: %s %s, status code: %s", operation, path, response.status_code)
            return KlaviyoResult(
                ok=True,
                status_code=response.status_code,
                data=_decode_body(response),
                response=response,
            )

        self.logger.error(
            "Klaviyo API called: %s %s, data: %r, status code: %s, message: %s",
            operation,
            path,
            payload,
            response.status_code,
            response.text,
        )
        return KlaviyoResult.failure(
            ErrorKind.UNEXPECTED_STATUS,
            status_code=response.status_code,
            data=_decode_body(response),
            errors=parse_errors(response),
            response=response,
        )

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
        """Track an event against the profile identified by its id or email."""
        if not email and not profile_id:
            self.logger.error("Klaviyo API called: track api/events, message: You must identify a user by email or ID")
            return KlaviyoResult.failure(ErrorKind.MISSING_IDENTIFIER)

        properties = properties or {}
        profile_attributes = dict(customer_properties or {})
        if email:
            profile_attributes["email"] = email

        profile = {"type": "profile", "attributes": profile_attributes}
        if profile_id:
            profile["id"] = profile_id

        value = properties.get("value")
        payload = {
            "data": {
                "type": "event",
                "attributes": {
                    "properties": properties,
                    "time": format_event_time(time) if time else None,
                    "value": 0 if value is None else value,
                    "value_currency": "USD",
                    "metric": {"data": {"type": "metric", "attributes": {"name": event}}},
                    "profile": {"data": profile},
                },
            }
        }
        return self._request("POST", "api/events", "track", (requests.codes.accepted,), payload)

    def identify(
        self,
        base_attributes: dict,
        custom_properties: dict | None = None,
        *,
        max_retries: int = 1,
    ) -> KlaviyoResult:
        """
        Create or update a profile through the profile import endpoint.

        When the API rejects the phone number, either because another profile
        already owns it or because it can't receive SMS, the profile is sent again
        without it and with a custom property flagging the reason. At most
        `max_retries` such resubmissions are made.

        The caller's dictionaries are left untouched.
        """
        if not base_attributes.get("email"):
            self.logger.error(
                "Klaviyo API called: identify api/profile-import, message: You must identify a user by email"
            )
            return KlaviyoResult.failure(ErrorKind.MISSING_IDENTIFIER)

        attributes = dict(base_attributes)
        properties = dict(custom_properties or {})
        retries = 0
        while True:
            result = self._request(
                "POST",
                "api/profile-import",
                "identify",
                (requests.codes.ok, requests.codes.created),
                self._profile_import_payload(attributes, properties),
            )
            result.retries = retries
            if result.ok or result.response is None:
                return result

            result.error_kind = classify_profile_import_errors(result.status_code, result.errors)
            marker = PHONE_RETRY_MARKERS.get(result.error_kind)
            if marker is None or retries >= max_retries or not attributes.get("phone_number"):
                return result

            self.logger.warning(
                "Klaviyo profile import rejected the phone number (%s), retrying without it", result.error_kind
            )
            del attributes["phone_number"]
            properties[marker] = True
            retries += 1

    @staticmethod
    def _profile_import_payload(attributes: dict, properties: dict) -> dict:
        profile_attributes = {
            name: attributes[name] for name in PROFILE_BASE_ATTRIBUTES if attributes.get(name) is not None
        }
        profile_attributes["properties"] = properties
        return {"data": {"type": "profile", "attributes": profile_attributes}}

    def lists(self) -> KlaviyoResult:
        """Retrieve the lists of the account."""
        return self._request("GET", "api/lists", "lists", (requests.codes.ok,))

    @staticmethod
    def _subscription_job_payload(profile: dict, list_id: str) -> dict:
        return {
            "data": {
                "type": "profile-subscription-bulk-create-job",
                "attributes": {"profiles": {"data": [profile]}},
                "relationships": {"list": {"data": {"type": "list", "id": list_id}}},
            }
        }

    def add_to_list(self, email: str, list_id: str) -> KlaviyoResult:
        """Subscribe an email to a list, the subscription job is not polled."""
        payload = self._subscription_job_payload({"type": "profile", "attributes": {"email": email}}, list_id)
        return self._request(
            "POST",
            "api/profile-subscription-bulk-create-jobs/",
            "add to email list",
            (requests.codes.accepted,),
            payload,
        )

    def add_to_sms_list(self, phone: str, email: str, list_id: str) -> KlaviyoResult:
        """Subscribe a phone number to a list, consenting to SMS marketing."""
        profile = {
            "type": "profile",
            "attributes": {"email": email, "phone_number": phone},
            "subscriptions": {"sms": {"marketing": {"consent": "SUBSCRIBED"}}},
        }
        return self._request(
            "POST",
            "api/profile-subscription-bulk-create-jobs/",
            "add to sms list",
            (requests.codes.accepted,),
            self._subscription_job_payload(profile, list_id),
        )

    def get_profile(self, profile_id: str) -> KlaviyoResult:
        """Retrieve a profile by its Klaviyo id."""
        return self._request("GET", f"api/profiles/{profile_id}", "get profile", (requests.codes.ok,))

    def update_profile(self, profile_id: str, properties: dict) -> KlaviyoResult:
        """Update the attributes of a profile."""
        payload = {"data": {"type": "profile", "id": profile_id, "attributes": properties}}
        return self._request(
            "PATCH",
            f"api/profiles/{profile_id}",
            "update profile",
            (requests.codes.ok,),
            payload,
        )

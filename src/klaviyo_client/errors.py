"""Klaviyo API error parsing."""

from dataclasses import dataclass, field
from enum import StrEnum

import requests

SMS_INELIGIBLE_MESSAGE = "phone number provided either does not exist or is ineligible to receive SMS"


class ErrorKind(StrEnum):
    """Category of a failed Klaviyo operation."""

    MISSING_IDENTIFIER = "missing_identifier"
    DUPLICATE_PROFILE = "duplicate_profile"
    INVALID_PHONE_NUMBER = "invalid_phone_number"
    UNEXPECTED_STATUS = "unexpected_status"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class KlaviyoApiError:
    """One entry of the `errors` array of a Klaviyo JSON:API error document."""

    id: str | None = None
    status: int | None = None
    code: str | None = None
    title: str | None = None
    detail: str | None = None
    source_pointer: str | None = None
    meta: dict = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict) -> "KlaviyoApiError":
        """Create from a Klaviyo API error object."""
        status = data.get("status")
        try:
            status = int(status) if status is not None else None
        except (TypeError, ValueError):
            status = None
        return cls(
            id=data.get("id"),
            status=status,
            code=data.get("code"),
            title=data.get("title"),
            detail=data.get("detail"),
            source_pointer=(data.get("source") or {}).get("pointer"),
            meta=data.get("meta") or {},
        )

    @property
    def targets_phone_number(self) -> bool:
        """Whether the error is about the profile phone number."""
        if self.source_pointer and self.source_pointer.rstrip("/").endswith("phone_number"):
            return True
        return SMS_INELIGIBLE_MESSAGE in (self.detail or "")


def parse_errors(response: requests.Response) -> list[KlaviyoApiError]:
    """Extract the structured errors of a Klaviyo response, if any."""
    try:
        document = response.json()
    except ValueError:
        return []
    if not isinstance(document, dict):
        return []
    errors = document.get("errors") or []
    return [KlaviyoApiError.from_api(error) for error in errors if isinstance(error, dict)]


def classify_profile_import_errors(status_code: int, errors: list[KlaviyoApiError]) -> ErrorKind:
    """
    Map a failed profile import to an error kind.

    Only two kinds are recoverable by resubmitting the profile without its phone
    number: a 409 `duplicate_profile` conflict (another profile already owns the
    phone number) and a 400 rejecting the phone number as unable to receive SMS.
    """
    if status_code == requests.codes.conflict and any(error.code == "duplicate_profile" for error in errors):
        return ErrorKind.DUPLICATE_PROFILE
    if status_code == requests.codes.bad_request and any(error.targets_phone_number for error in errors):
        return ErrorKind.INVALID_PHONE_NUMBER
    return ErrorKind.UNEXPECTED_STATUS

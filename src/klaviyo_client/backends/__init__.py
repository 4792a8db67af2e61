"""Klaviyo backends module."""

from dataclasses import asdict, dataclass, field

import requests

from klaviyo_client.errors import ErrorKind, KlaviyoApiError


@dataclass
class KlaviyoResult:
    """
    Outcome of a Klaviyo operation.

    A result is truthy only when the API answered with the status expected for the
    operation. `response` is the raw `requests.Response`, left untouched, or None
    when no request could be made.
    """

    ok: bool
    status_code: int | None = None
    data: dict | None = None
    errors: list[KlaviyoApiError] = field(default_factory=list)
    error_kind: ErrorKind | None = None
    response: requests.Response | None = None
    retries: int = 0

    def __bool__(self):
        """Truth value of the outcome."""
        return self.ok

    @classmethod
    def failure(cls, error_kind: ErrorKind, **kwargs) -> "KlaviyoResult":
        """Build a failed result."""
        return cls(ok=False, error_kind=error_kind, **kwargs)

    def as_dict(self) -> dict:
        """Return a JSON serializable representation, without the raw response."""
        return {
            "ok": self.ok,
            "status_code": self.status_code,
            "data": self.data,
            "errors": [asdict(error) for error in self.errors],
            "error_kind": str(self.error_kind) if self.error_kind else None,
            "retries": self.retries,
        }

"""Test the Klaviyo tasks."""

from datetime import UTC, datetime
from unittest import mock

from klaviyo_client import tasks
from klaviyo_client.backends import KlaviyoResult
from klaviyo_client.errors import ErrorKind


def test_track():
    """The track task parses the event time and serializes the result."""
    with mock.patch.object(tasks, "klaviyo") as mock_klaviyo:
        mock_klaviyo.track = mock.MagicMock(return_value=KlaviyoResult(ok=True, status_code=202))

        result = tasks.track(
            "Placed Order",
            email="jane@example.com",
            properties={"value": 42},
            time="2024-03-01T12:30:00+00:00",
        )

        mock_klaviyo.track.assert_called_once_with(
            "Placed Order",
            profile_id=None,
            email="jane@example.com",
            properties={"value": 42},
            customer_properties=None,
            time=datetime(2024, 3, 1, 12, 30, tzinfo=UTC),
        )
        mock_klaviyo.track_once.assert_not_called()
        assert result["ok"] is True
        assert result["status_code"] == 202


def test_track_once():
    """The track task can track an event only once."""
    with mock.patch.object(tasks, "klaviyo") as mock_klaviyo:
        mock_klaviyo.track_once = mock.MagicMock(return_value=KlaviyoResult(ok=True, status_code=202))

        tasks.track("Started Trial", profile_id="P1", once=True)

        mock_klaviyo.track_once.assert_called_once_with(
            "Started Trial",
            profile_id="P1",
            email=None,
            properties=None,
            customer_properties=None,
            time=None,
        )
        mock_klaviyo.track.assert_not_called()


def test_identify():
    """The identify task returns the serialized failure."""
    with mock.patch.object(tasks, "klaviyo") as mock_klaviyo:
        mock_klaviyo.identify = mock.MagicMock(return_value=KlaviyoResult.failure(ErrorKind.MISSING_IDENTIFIER))

        result = tasks.identify({"first_name": "Jane"}, {"plan": "pro"})

        mock_klaviyo.identify.assert_called_once_with({"first_name": "Jane"}, {"plan": "pro"})
        assert result["ok"] is False
        assert result["error_kind"] == "missing_identifier"


def test_list_and_profile_tasks():
    """The list and profile tasks delegate to the default client."""
    with mock.patch.object(tasks, "klaviyo") as mock_klaviyo:
        for method in ("add_to_list", "add_to_sms_list", "update_profile"):
            setattr(mock_klaviyo, method, mock.MagicMock(return_value=KlaviyoResult(ok=True, status_code=202)))

        tasks.add_to_list("a@b.com", "L1")
        tasks.add_to_sms_list("+15551234567", "a@b.com", "L1")
        tasks.update_profile("P1", {"properties": {"plan": "pro"}})

        mock_klaviyo.add_to_list.assert_called_once_with("a@b.com", "L1")
        mock_klaviyo.add_to_sms_list.assert_called_once_with("+15551234567", "a@b.com", "L1")
        mock_klaviyo.update_profile.assert_called_once_with("P1", {"properties": {"plan": "pro"}})

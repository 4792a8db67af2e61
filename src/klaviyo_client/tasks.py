"""Klaviyo tasks module."""

from celery import shared_task
from django.utils.dateparse import parse_datetime

from klaviyo_client import klaviyo


@shared_task
def track(
    event: str,
    profile_id: str | None = None,
    email: str | None = None,
    properties: dict | None = None,
    customer_properties: dict | None = None,
    time: str | None = None,
    once: bool = False,
):
    """Track an event, `time` being an ISO 8601 string."""
    method = klaviyo.track_once if once else klaviyo.track
    result = method(
        event,
        profile_id=profile_id,
        email=email,
        properties=properties,
        customer_properties=customer_properties,
        time=parse_datetime(time) if time else None,
    )
    return result.as_dict()


@shared_task
def identify(base_attributes: dict, custom_properties: dict | None = None):
    """Create or update a profile."""
    return klaviyo.identify(base_attributes, custom_properties).as_dict()


@shared_task
def add_to_list(email: str, list_id: str):
    """Subscribe an email to a list."""
    return klaviyo.add_to_list(email, list_id).as_dict()


@shared_task
def add_to_sms_list(phone: str, email: str, list_id: str):
    """Subscribe a phone number to a list with SMS marketing consent."""
    return klaviyo.add_to_sms_list(phone, email, list_id).as_dict()


@shared_task
def update_profile(profile_id: str, properties: dict):
    """Update the attributes of a profile."""
    return klaviyo.update_profile(profile_id, properties).as_dict()

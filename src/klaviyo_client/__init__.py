"""Klaviyo client module."""

from django.utils.functional import LazyObject

from .handler import KlaviyoHandler


class DefaultKlaviyo(LazyObject):
    """Lazy object to handle the Klaviyo backend."""

    def _setup(self):
        """Configure the Klaviyo backend."""
        self._wrapped = klaviyo_handler()


klaviyo_handler = KlaviyoHandler()
klaviyo = DefaultKlaviyo()

"""Klaviyo backend handler."""

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.functional import cached_property
from django.utils.module_loading import import_string

from klaviyo_client.exceptions import KlaviyoInvalidBackendError


class KlaviyoHandler:
    """Klaviyo handler managing the backend instantiation."""

    def __init__(self, backend=None):
        """Initialize the Klaviyo handler."""
        # backend is an optional dict structured like settings.KLAVIYO
        self._backend = backend
        self._klaviyo = None

    @cached_property
    def backend(self):
        """Put in cache the backend properties from the settings."""
        if self._backend is None:
            try:
                self._backend = settings.KLAVIYO.copy()
            except AttributeError as e:
                raise ImproperlyConfigured("settings.KLAVIYO is not configured") from e
        return self._backend

    def __call__(self):
        """Create if not existing the backend and then return it."""
        if self._klaviyo is None:
            self._klaviyo = self.create_klaviyo(self.backend)
        return self._klaviyo

    def create_klaviyo(self, params):
        """Instantiate and configure the Klaviyo backend."""
        params = params.copy()
        try:
            backend = params.pop("BACKEND")
        except KeyError as e:
            raise ImproperlyConfigured("settings.KLAVIYO must define a BACKEND") from e
        parameters = params.pop("PARAMETERS", {})
        try:
            klass = import_string(backend)
        except ImportError as e:
            raise KlaviyoInvalidBackendError(f"Could not find backend {backend!r}: {e}") from e
        return klass(**parameters)

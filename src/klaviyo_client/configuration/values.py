"""Custom value classes for django-configurations."""

import os

from configurations import values

DEFAULT_BACKEND = "klaviyo_client.backends.klaviyo.KlaviyoBackend"


class KlaviyoSettingsValue(values.Value):
    """
    Class used to build the `KLAVIYO` setting from environment variables.

    With `name` set to `KLAVIYO` and the default `DJANGO` prefix, the variables read are:
    * `DJANGO_KLAVIYO_API_KEY`, or `DJANGO_KLAVIYO_API_KEY_FILE` pointing to a file
      holding the key, the file taking precedence.
    * `DJANGO_KLAVIYO_BACKEND`, the dotted path of the backend class.
    * `DJANGO_KLAVIYO_URL`, the base URL of the API.
    * `DJANGO_KLAVIYO_TIMEOUT`, the request timeout in seconds.

    When neither an API key nor a backend is set, the default value is used.
    """

    def _read_api_key(self, prefix):
        """Read the API key from its file or from the environment."""
        filename = os.environ.get(f"{prefix}_API_KEY_FILE")
        if filename is None:
            return os.environ.get(f"{prefix}_API_KEY")
        if not os.path.exists(filename):
            raise ValueError(f"Path {filename!r} does not exist.")
        try:
            with open(filename) as file:
                return file.read().strip()
        except OSError as err:
            raise ValueError(f"Path {filename!r} cannot be read: {err!r}") from err

    def setup(self, name):
        """Get the value from environment variables."""
        value = self.default
        if self.environ:
            prefix = self.full_environ_name(name)
            api_key = self._read_api_key(prefix)
            backend = os.environ.get(f"{prefix}_BACKEND")
            if api_key is not None or backend is not None:
                parameters = {}
                if api_key is not None:
                    parameters["api_key"] = api_key
                if f"{prefix}_URL" in os.environ:
                    parameters["base_url"] = os.environ[f"{prefix}_URL"]
                if f"{prefix}_TIMEOUT" in os.environ:
                    try:
                        parameters["timeout"] = int(os.environ[f"{prefix}_TIMEOUT"])
                    except ValueError as err:
                        raise ValueError(f"{prefix}_TIMEOUT must be an integer") from err
                value = {"BACKEND": backend or DEFAULT_BACKEND, "PARAMETERS": parameters}
            elif self.environ_required:
                raise ValueError(
                    f"Value {name!r} is required to be set with the environment variable "
                    f"{prefix}_API_KEY, {prefix}_API_KEY_FILE or {prefix}_BACKEND"
                )
        self.value = value
        return value

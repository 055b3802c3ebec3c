class CounterError(Exception):
    """Base class for web counter failures."""


class ConfigError(CounterError):
    """Environment configuration is missing or invalid."""


class StoreError(CounterError):
    """The backing store could not complete an operation.

    The message is safe to return to HTTP clients as-is.
    """

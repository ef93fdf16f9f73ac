"""Exception types raised by the lull library."""


class LullError(Exception):
    """Base class for all errors raised by lull itself."""


class ConfigurationError(LullError, ValueError):
    """Raised at construction time when a wrapper is configured inconsistently.

    No wrapper is produced when this is raised.
    """

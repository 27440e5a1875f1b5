"""Exceptions raised by the Lyra engine and its configuration layer."""


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


class RuleTableError(ConfigurationError):
    """Raised when a rule table definition is invalid."""
    pass

"""Custom exceptions for Sifter."""


class SifterError(Exception):
    """Base exception for application-level errors."""


class ConfigError(SifterError):
    """Raised when configuration cannot be loaded or validated."""


class UnknownModeError(SifterError):
    """Raised when a submitter mode has no threshold entry."""


class BatchInputError(SifterError):
    """Raised when a batch upload is malformed or too large."""


class CheckRegistrationError(SifterError):
    """Raised when a verification check cannot be registered or looked up."""

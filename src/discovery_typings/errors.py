"""Exceptions raised while turning discovery documents into declarations."""


class DiscoveryTypingsError(Exception):
    """Base class for all errors raised by discovery-typings."""


class MalformedDocumentError(DiscoveryTypingsError, ValueError):
    """A discovery document lacks something the generator relies on."""


class ConfigurationError(DiscoveryTypingsError):
    """The configuration file could not be read or validated."""


class ValidationError(DiscoveryTypingsError):
    """Rendered files failed the structural checks and were not published."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        details = "; ".join(f"{name}: {msg}" for name, msg in errors.items())
        super().__init__(f"Generated files failed validation: {details}")


class ServiceProcessingError(DiscoveryTypingsError):
    """Processing of a single API failed."""

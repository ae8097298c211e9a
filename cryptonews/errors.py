"""Exception types shared across the pipeline."""


class CryptoNewsError(Exception):
    """Base class for cryptonews errors."""


class InvalidRequestError(CryptoNewsError, ValueError):
    """Request rejected before any per-item work started."""


class ConfigurationError(CryptoNewsError):
    """A required external-service setting is missing or invalid."""


class ModelCallError(CryptoNewsError):
    """The generative model could not be reached or returned nothing."""

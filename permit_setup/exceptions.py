"""
Exception hierarchy for Permit Setup.

All custom exceptions inherit from PermitSetupError base class.
"""


class PermitSetupError(Exception):
    """Base exception for all Permit Setup errors."""
    pass


# Configuration Errors
class ConfigurationError(PermitSetupError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass


class MissingCredentialError(ConfigurationError):
    """Raised when the API credential is not configured."""
    pass


# Validation Errors
class ValidationError(PermitSetupError):
    """Base exception for invalid local policy definitions."""
    pass


class InvalidKeyError(ValidationError):
    """Raised when a resource, role, attribute or set key is malformed."""
    pass


class InvalidConditionError(ValidationError):
    """Raised when a condition expression cannot be built or parsed."""
    pass


# API Errors
class ApiError(PermitSetupError):
    """Base exception for administrative API errors."""
    pass


class TransportError(ApiError):
    """Raised by adapters when the request never produced a response."""
    pass


class RequestTimeoutError(TransportError):
    """Raised when a request exceeds its configured timeout."""
    pass

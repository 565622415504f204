class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class ConfigurationError(DomainError):
    """Raised when a required configuration value is absent or invalid."""


class IntegrityError(DomainError):
    """Raised when a sealed clock event fails verification and the caller demands validity."""

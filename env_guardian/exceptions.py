"""
ABOUTME: Custom exception classes for environment variable validation
ABOUTME: Provides specific error types for missing, mistyped, constrained and misconfigured fields
"""

from typing import List, Optional


class EnvGuardianError(Exception):
    """Validation error tied to an environment variable."""

    def __init__(self, message: str = "", variable: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.variable = variable


class MissingVariableError(EnvGuardianError):
    """Required environment variable is absent or empty."""

    pass


class TypeMismatchError(EnvGuardianError):
    """Raw value cannot be coerced to the declared type."""

    pass


class ConstraintViolationError(EnvGuardianError):
    """Coerced value violates a declared bound."""

    pass


class CustomValidatorError(EnvGuardianError):
    """User-supplied coercion function signaled failure."""

    pass


class SchemaConfigError(EnvGuardianError):
    """The schema itself is malformed.

    Not attributable to a single input value, so ``variable`` is left unset.
    """

    def __init__(self, message: str = ""):
        super().__init__(message)


class ConfigError(EnvGuardianError):
    """Invalid tool option read from the environment."""

    pass


class EnvValidationError(EnvGuardianError):
    """One or more fields failed validation."""

    def __init__(
        self, message: str = "", errors: Optional[List[EnvGuardianError]] = None
    ):
        super().__init__(message)
        self.errors = list(errors or [])

"""
ABOUTME: Environment variable validation package for typed application configuration
ABOUTME: Provides schema-driven coercion, error types and a fail-fast convenience wrapper
"""

from .exceptions import (
    ConfigError,
    ConstraintViolationError,
    CustomValidatorError,
    EnvGuardianError,
    EnvValidationError,
    MissingVariableError,
    SchemaConfigError,
    TypeMismatchError,
)
from .schema import FieldSpec, FieldType
from .validator import EnvGuardian, ValidationResult, env_guardian

__version__ = "0.1.0"
__all__ = [
    "EnvGuardian",
    "ValidationResult",
    "env_guardian",
    "FieldSpec",
    "FieldType",
    "EnvGuardianError",
    "MissingVariableError",
    "TypeMismatchError",
    "ConstraintViolationError",
    "CustomValidatorError",
    "SchemaConfigError",
    "EnvValidationError",
    "ConfigError",
]

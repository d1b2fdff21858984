"""
ABOUTME: Schema-driven validation of environment variables
ABOUTME: Runs every schema field through its coercer in fail-fast or collect-all mode
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .coercers import Coercion, coerce
from .config import DEFAULT_DOTENV_PATH, GuardianOptions, load_environment
from .exceptions import EnvGuardianError, EnvValidationError, MissingVariableError
from .schema import FieldDefinition, FieldSpec, normalize_schema


@dataclass
class ValidationResult:
    """
    Outcome of validating a schema.

    ``values`` holds every schema field; fields that were unset, or whose validation failed, map to None.
    The result is falsy when invalid.
    """

    values: Dict[str, Any] = field(default_factory=dict)
    errors: List[EnvGuardianError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid

    def summary_error(self) -> Optional[EnvValidationError]:
        """Combine all errors into one EnvValidationError, or None when valid."""
        if not self.errors:
            return None
        messages = "\n".join(e.message for e in self.errors)
        return EnvValidationError(f"Environment validation failed:\n{messages}", self.errors)


def _stringify_default(default: Any, separator: str = ",") -> str:
    # bools must round-trip through the boolean coercer
    if isinstance(default, bool):
        return "true" if default else "false"
    if isinstance(default, (list, tuple)):
        return separator.join(_stringify_default(item, separator) for item in default)
    return str(default)


class EnvGuardian:
    """Validates environment variables against a declarative schema."""

    def __init__(
        self,
        load_dotenv: bool = True,
        dotenv_path: Union[str, Path] = DEFAULT_DOTENV_PATH,
        strict: bool = False,
    ):
        """
        Initialize the validator and optionally load an env file into os.environ.

        Parameters:
            load_dotenv (bool): Load ``dotenv_path`` before any validation.
            dotenv_path (str | Path): Env file to load.
            strict (bool): Fail fast by raising the first field error instead of collecting all errors.
        """
        self.options = GuardianOptions(
            load_dotenv=load_dotenv, dotenv_path=dotenv_path, strict=strict
        )
        if self.options.load_dotenv:
            load_environment(self.options.dotenv_path)

    @property
    def strict(self) -> bool:
        return self.options.strict

    def _process_field(self, key: str, spec: FieldSpec, environ: Mapping[str, str]) -> Coercion:
        raw = environ.get(key)
        if raw is None or raw == "":
            if spec.required:
                return Coercion.failure(
                    MissingVariableError(f"Missing required environment variable: {key}", key)
                )
            if not spec.has_default:
                return Coercion.success(None)
            raw = _stringify_default(spec.default, spec.separator)
        return coerce(raw, key, spec)

    def validate(
        self,
        schema: Mapping[str, FieldDefinition],
        environ: Optional[Mapping[str, str]] = None,
    ) -> ValidationResult:
        """
        Validate and coerce every field of a schema.

        Parameters:
            schema (Mapping): Field name to FieldSpec, mapping of FieldSpec keys, or bare type tag.
            environ (Mapping, optional): Source of raw values. Defaults to os.environ.

        Returns:
            ValidationResult: Coerced values plus the errors collected in schema order.

        Raises:
            SchemaConfigError: If a field definition is malformed, in any mode. Raised before any field is processed.
            EnvGuardianError: In strict mode, the first field error; remaining fields are not processed.
        """
        if environ is None:
            environ = os.environ

        specs = normalize_schema(schema)
        result = ValidationResult()
        for key, spec in specs.items():
            result.values[key] = None
            outcome = self._process_field(key, spec, environ)
            if outcome.ok:
                result.values[key] = outcome.value
                continue

            logging.debug(f"Validation failed for {key}: {outcome.error.message}")
            if self.strict:
                raise outcome.error
            result.errors.append(outcome.error)

        return result


def env_guardian(
    schema: Mapping[str, FieldDefinition],
    environ: Optional[Mapping[str, str]] = None,
    **options: Any,
) -> Dict[str, Any]:
    """
    Validate a schema and return the coerced values.

    Keyword options are passed to EnvGuardian. Raises the first recorded error when validation fails.
    """
    guardian = EnvGuardian(**options)
    result = guardian.validate(schema, environ)
    if not result.is_valid:
        raise result.errors[0] if result.errors else EnvValidationError("Validation failed")
    return result.values

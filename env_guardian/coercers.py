"""
ABOUTME: Type coercers converting raw environment strings into typed values
ABOUTME: Each coercer enforces its type's constraints and reports failures as a Coercion result
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlsplit

from .exceptions import (
    ConstraintViolationError,
    CustomValidatorError,
    EnvGuardianError,
    SchemaConfigError,
    TypeMismatchError,
)
from .schema import FieldSpec, FieldType

TRUE_VALUES = frozenset({"true", "1", "yes"})
FALSE_VALUES = frozenset({"false", "0", "no"})

NON_FINITE_SPELLINGS = frozenset({"inf", "infinity", "nan"})

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Schemes that always carry a host
_HOST_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})


@dataclass(frozen=True)
class Coercion:
    """Outcome of coercing one raw value: either a value or an error."""

    value: Any = None
    error: Optional[EnvGuardianError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> "Coercion":
        return cls(value=value)

    @classmethod
    def failure(cls, error: EnvGuardianError) -> "Coercion":
        return cls(error=error)


def coerce_string(value: str, key: str, spec: FieldSpec) -> Coercion:
    if spec.min_length is not None and len(value) < spec.min_length:
        return Coercion.failure(
            ConstraintViolationError(
                f"{key} must be at least {spec.min_length} characters long", key
            )
        )
    if spec.max_length is not None and len(value) > spec.max_length:
        return Coercion.failure(
            ConstraintViolationError(
                f"{key} must be no more than {spec.max_length} characters long", key
            )
        )
    if spec.pattern is not None and not spec.pattern.search(value):
        return Coercion.failure(
            ConstraintViolationError(
                f"{key} does not match required pattern {spec.pattern.pattern!r}", key
            )
        )
    return Coercion.success(value)


def _parse_number(value: str) -> Optional[float]:
    # float() also accepts digit separators and inf/nan spellings, which are not decimal notation
    if "_" in value:
        return None
    unsigned = value.strip().lstrip("+-")
    if unsigned.lower() in NON_FINITE_SPELLINGS and unsigned != "Infinity":
        return None
    try:
        num = float(value)
    except ValueError:
        return None
    if math.isnan(num):
        return None
    return num


def coerce_number(value: str, key: str, spec: FieldSpec) -> Coercion:
    """
    Parse a decimal number and check its bounds.

    Integral results are returned as int so that "42" coerces to 42 rather than 42.0.
    """
    num = _parse_number(value)
    if num is None:
        return Coercion.failure(
            TypeMismatchError(
                f'Invalid type for {key}. Expected number, got "{value}"', key
            )
        )
    if spec.min is not None and num < spec.min:
        return Coercion.failure(
            ConstraintViolationError(f"{key} must be at least {spec.min}", key)
        )
    if spec.max is not None and num > spec.max:
        return Coercion.failure(
            ConstraintViolationError(f"{key} must be no more than {spec.max}", key)
        )
    is_integral = math.isfinite(num) and num.is_integer()
    if spec.integer and not is_integral:
        return Coercion.failure(ConstraintViolationError(f"{key} must be an integer", key))
    return Coercion.success(int(num) if is_integral else num)


def coerce_boolean(value: str, key: str, spec: FieldSpec) -> Coercion:
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return Coercion.success(True)
    if lowered in FALSE_VALUES:
        return Coercion.success(False)
    return Coercion.failure(
        TypeMismatchError(f'Invalid type for {key}. Expected boolean, got "{value}"', key)
    )


def coerce_array(value: str, key: str, spec: FieldSpec) -> Coercion:
    items: List[str] = [item.strip() for item in value.split(spec.separator)]
    if spec.min_length is not None and len(items) < spec.min_length:
        return Coercion.failure(
            ConstraintViolationError(
                f"{key} must have at least {spec.min_length} items", key
            )
        )
    if spec.max_length is not None and len(items) > spec.max_length:
        return Coercion.failure(
            ConstraintViolationError(
                f"{key} must have no more than {spec.max_length} items", key
            )
        )
    return Coercion.success(items)


def _url_scheme(value: str) -> Optional[str]:
    """Return the URL's scheme, or None if the value is not an absolute URL."""
    candidate = value.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return None
    try:
        parts = urlsplit(candidate)
        # raises ValueError on a malformed port
        parts.port
    except ValueError:
        return None
    if not parts.scheme or len(candidate) <= len(parts.scheme) + 1:
        return None
    if parts.scheme in _HOST_SCHEMES and not parts.hostname:
        return None
    return parts.scheme


def coerce_url(value: str, key: str, spec: FieldSpec) -> Coercion:
    scheme = _url_scheme(value)
    if scheme is None:
        return Coercion.failure(TypeMismatchError(f'Invalid URL for {key}: "{value}"', key))
    if spec.protocols:
        allowed = {p.rstrip(":").lower() for p in spec.protocols}
        if scheme not in allowed:
            return Coercion.failure(
                ConstraintViolationError(
                    f"{key} must use one of these protocols: {', '.join(spec.protocols)}",
                    key,
                )
            )
    return Coercion.success(value)


def coerce_email(value: str, key: str, spec: FieldSpec) -> Coercion:
    if not EMAIL_PATTERN.fullmatch(value):
        return Coercion.failure(
            ConstraintViolationError(f'Invalid email format for {key}: "{value}"', key)
        )
    return Coercion.success(value)


def coerce_enum(value: str, key: str, spec: FieldSpec) -> Coercion:
    """
    Check membership in the spec's values list.

    Raises:
        SchemaConfigError: If the spec has no non-empty values list. This is a schema authoring bug, so it is raised rather than reported.
    """
    if not isinstance(spec.values, (list, tuple)) or not spec.values:
        raise SchemaConfigError(f"Enum validation requires a non-empty 'values' list for {key}")
    if value not in spec.values:
        allowed = ", ".join(str(v) for v in spec.values)
        return Coercion.failure(
            ConstraintViolationError(f'{key} must be one of: {allowed}. Got "{value}"', key)
        )
    return Coercion.success(value)


def coerce_custom(value: str, key: str, spec: FieldSpec) -> Coercion:
    """
    Run a user-supplied coercion function.

    The function receives as many of (value, key, spec) as its signature accepts.

    EnvGuardianError raised by the function is reported as-is, with the field name attached if missing.
    Any other exception is wrapped in CustomValidatorError.
    """
    try:
        args = (value, key, spec)[: spec.custom_arity]
        return Coercion.success(spec.custom(*args))
    except SchemaConfigError:
        raise
    except EnvGuardianError as e:
        if e.variable is None:
            e.variable = key
        return Coercion.failure(e)
    except Exception as e:
        logging.debug(f"Custom coercer for {key} raised {type(e).__name__}: {e}")
        error = CustomValidatorError(f"{key}: {e}", key)
        error.__cause__ = e
        return Coercion.failure(error)


COERCERS: Dict[FieldType, Callable[[str, str, FieldSpec], Coercion]] = {
    FieldType.STRING: coerce_string,
    FieldType.NUMBER: coerce_number,
    FieldType.BOOLEAN: coerce_boolean,
    FieldType.ARRAY: coerce_array,
    FieldType.URL: coerce_url,
    FieldType.EMAIL: coerce_email,
    FieldType.ENUM: coerce_enum,
    FieldType.CUSTOM: coerce_custom,
}


def coerce(value: str, key: str, spec: FieldSpec) -> Coercion:
    """Dispatch a raw value to the coercer for the spec's type."""
    return COERCERS[spec.type](value, key, spec)

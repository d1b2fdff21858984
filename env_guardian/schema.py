"""
ABOUTME: Field specification model for environment variable schemas
ABOUTME: Normalizes shorthand and mapping definitions into FieldSpec objects and loads JSON schema files
"""

import inspect
import json
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .exceptions import SchemaConfigError


class FieldType(str, Enum):
    """Built-in coercion kinds, plus CUSTOM for user-supplied callables."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    URL = "url"
    EMAIL = "email"
    ENUM = "enum"
    CUSTOM = "custom"


CustomCoercer = Callable[[str, str, "FieldSpec"], Any]

# camelCase keys are accepted alongside snake_case ones
_KEY_ALIASES = {
    "minLength": "min_length",
    "maxLength": "max_length",
}

_SPEC_KEYS = {
    "type",
    "required",
    "default",
    "min_length",
    "max_length",
    "pattern",
    "min",
    "max",
    "integer",
    "separator",
    "protocols",
    "values",
}


@dataclass(frozen=True)
class FieldSpec:
    """How to interpret one environment variable."""

    type: FieldType = FieldType.STRING
    custom: Optional[CustomCoercer] = None
    custom_arity: int = 3
    required: bool = False
    default: Any = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[re.Pattern] = None
    min: Optional[float] = None
    max: Optional[float] = None
    integer: bool = False
    separator: str = ","
    protocols: Optional[List[str]] = None
    values: Any = None

    @property
    def has_default(self) -> bool:
        return self.default is not None


FieldDefinition = Union[FieldSpec, str, FieldType, CustomCoercer, Mapping[str, Any]]


def _custom_arity(name: str, func: CustomCoercer) -> int:
    """
    Number of leading arguments (value, key, spec) to pass to a custom coercer.

    Optional parameters are not filled. Callables without an inspectable signature, such as int, receive the value only.
    """
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return 1

    positional = [
        p
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return 3
    required = [p for p in positional if p.default is inspect.Parameter.empty]
    if not positional or len(required) > 3:
        raise SchemaConfigError(
            f"Coercion function for field '{name}' must accept (value), (value, key) or (value, key, spec)"
        )
    return max(len(required), 1)


def _resolve_type(name: str, tag: Any) -> Tuple[FieldType, Optional[CustomCoercer]]:
    """Map a type tag to (FieldType, custom callable or None)."""
    if isinstance(tag, FieldType):
        if tag is FieldType.CUSTOM:
            raise SchemaConfigError(
                f"Field '{name}' uses type 'custom' without a coercion function"
            )
        return tag, None
    if callable(tag):
        return FieldType.CUSTOM, tag
    if isinstance(tag, str):
        try:
            field_type = FieldType(tag.lower())
        except ValueError:
            field_type = None
        if field_type is not None and field_type is not FieldType.CUSTOM:
            return field_type, None
        allowed = ", ".join(t.value for t in FieldType if t is not FieldType.CUSTOM)
        raise SchemaConfigError(
            f"Unknown type '{tag}' for field '{name}'. Expected one of: {allowed} or a callable"
        )
    raise SchemaConfigError(f"Invalid type {tag!r} for field '{name}'")


def _compile_pattern(name: str, pattern: Any) -> Optional[re.Pattern]:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    if isinstance(pattern, str):
        try:
            return re.compile(pattern)
        except re.error as e:
            raise SchemaConfigError(
                f"Invalid pattern for field '{name}': {e}"
            ) from e
    raise SchemaConfigError(f"Pattern for field '{name}' must be a string or re.Pattern")


def normalize_field(name: str, definition: FieldDefinition) -> FieldSpec:
    """
    Convert a schema entry into a FieldSpec.

    Parameters:
        name (str): Field (environment variable) name, used in error messages.
        definition: A FieldSpec, a bare type tag (string, FieldType or callable), or a mapping of FieldSpec keys.

    Returns:
        FieldSpec: The normalized specification. Type defaults to string.

    Raises:
        SchemaConfigError: If the definition cannot be interpreted.
    """
    if isinstance(definition, FieldSpec):
        return definition
    if isinstance(definition, Mapping):
        options = {_KEY_ALIASES.get(k, k): v for k, v in definition.items()}
    elif definition is None:
        options = {}
    else:
        options = {"type": definition}

    unknown = sorted(set(options) - _SPEC_KEYS)
    if unknown:
        raise SchemaConfigError(
            f"Unknown option(s) for field '{name}': {', '.join(unknown)}"
        )

    tag = options.pop("type", None)
    if tag is None:
        tag = FieldType.STRING
    field_type, custom = _resolve_type(name, tag)
    options["pattern"] = _compile_pattern(name, options.get("pattern"))
    if not options.get("separator"):
        options.pop("separator", None)
    elif not isinstance(options["separator"], str):
        raise SchemaConfigError(f"Separator for field '{name}' must be a string")
    if "required" in options:
        options["required"] = bool(options["required"])
    if "integer" in options:
        options["integer"] = bool(options["integer"])

    if custom is not None:
        options["custom_arity"] = _custom_arity(name, custom)
    return FieldSpec(type=field_type, custom=custom, **options)


def normalize_schema(schema: Mapping[str, FieldDefinition]) -> Dict[str, FieldSpec]:
    """Normalize every entry of a schema, preserving its order."""
    return {name: normalize_field(name, definition) for name, definition in schema.items()}


def load_schema_file(path: Path) -> Dict[str, Any]:
    """
    Load a schema from a JSON file.

    The file must hold a JSON object mapping field names to a type tag string or an object of FieldSpec keys.
    Custom coercion functions cannot be expressed in JSON.
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaConfigError(f"Schema file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SchemaConfigError(f"Schema file {path} must contain a JSON object")
    return data

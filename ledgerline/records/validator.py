"""
Ledgerline error taxonomy and option-file validation.

The engine raises only for conditions that make a document or a configuration
unusable. Arity mismatches, unresolved references and unknown configuration
keys are tolerated and never reach this module.
"""

from enum import Enum, auto
from typing import Any, Dict, Optional

import jsonschema
import yaml


# Type definitions for schema structures
SchemaDict = Dict[str, Any]
ValidationResult = Dict[str, Any]


class ValidationSeverity(Enum):
    """Severity levels for option-file validation errors."""
    ERROR = auto()      # Validation failures that should prevent loading


class RecordError(ValueError):
    """Base class for all errors raised by the record engine."""


class ConfigurationConflictError(RecordError):
    """Raised when prefixes or metadata declarations contradict each other."""

    def __init__(self, message: str, prefix: Optional[str] = None, schema: Optional[str] = None):
        """
        Initialize configuration conflict error.

        Args:
            message: Error message
            prefix: The prefix involved in the conflict, if any
            schema: The schema for which the conflict arises, if any
        """
        self.message = message
        self.prefix = prefix
        self.schema = schema
        context = []
        if prefix is not None:
            context.append(f"prefix '{prefix}'")
        if schema is not None:
            context.append(f"schema '{schema}'")
        suffix = f" ({', '.join(context)})" if context else ""
        super().__init__(f"{message}{suffix}")


class DuplicateConfigurationError(ConfigurationConflictError):
    """Raised when a document defines the same configuration entry twice."""


class MissingSchemaDefinitionError(RecordError):
    """Raised when value rows exist for a schema that has no property block."""

    def __init__(self, schema: str):
        self.schema = schema
        super().__init__(f"Failed to identify property names for '{schema}'.")


class NoObjectDataError(RecordError, KeyError):
    """Raised when a schema is requested that is not part of the parsed data."""

    def __init__(self, schema: str):
        self.schema = schema
        super().__init__(f"The schema '{schema}' is not part of the deserialized data.")

    def __str__(self) -> str:
        return self.args[0]


class EmptyDocumentError(RecordError):
    """Raised when parsing is attempted on empty text."""

    def __init__(self):
        super().__init__("Text is empty.")


class OptionsValidationError(RecordError):
    """Exception raised when an options file fails validation."""

    def __init__(self, message: str, path: str = "", severity: ValidationSeverity = ValidationSeverity.ERROR):
        """
        Initialize validation error.

        Args:
            message: Error message
            path: JSON path where the error occurred
            severity: Validation error severity
        """
        self.message = message
        self.path = path
        self.severity = severity
        super().__init__(f"{path}: {message}" if path else message)


_DECLARATION_NAMES = {"type": "array", "items": {"type": "string"}}

OPTIONS_SCHEMA: SchemaDict = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Ledgerline options",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "prefixes": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "properties": {"type": "string", "minLength": 1},
                "values": {"type": "string", "minLength": 1},
                "conversion_type": {"type": "string", "minLength": 1},
                "conversion_value": {"type": "string", "minLength": 1},
            },
        },
        "comment_prefixes": {"type": "array", "items": {"type": "string", "minLength": 1}},
        "conversions": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "types": {"type": "boolean"},
                "values": {"type": "boolean"},
            },
        },
        "schemas": {
            "type": "object",
            "additionalProperties": {
                "anyOf": [
                    _DECLARATION_NAMES,
                    {
                        "type": "object",
                        "required": ["properties"],
                        "additionalProperties": False,
                        "properties": {
                            "properties": _DECLARATION_NAMES,
                            "columns": {
                                "type": "object",
                                "additionalProperties": {"type": "string", "minLength": 1},
                            },
                        },
                    },
                ],
            },
        },
        "metadata": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["prefix", "properties"],
                "additionalProperties": False,
                "properties": {
                    "prefix": {"type": "string", "minLength": 1},
                    "kind": {"enum": ["mapping", "structured", "tag"]},
                    "schema": {"type": "string"},
                    "descriptor": {"type": "string"},
                    "allow_nulls": {"type": "boolean"},
                    "properties": _DECLARATION_NAMES,
                },
            },
        },
        "references": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "name"],
                "additionalProperties": False,
                "properties": {
                    "schema": {"type": "string"},
                    "id": {"type": "string", "minLength": 1},
                    "name": {"type": "string", "minLength": 1},
                },
            },
        },
    },
}


class OptionsSchemaValidator:
    """Schema validator for option files (YAML or JSON) using JSON Schema."""

    def __init__(self, schema: Optional[SchemaDict] = None):
        self.schema = schema or OPTIONS_SCHEMA
        self._validator = jsonschema.Draft7Validator(self.schema)

    def validate(self, data: Any) -> ValidationResult:
        """
        Validate option data.

        Args:
            data: Options as YAML/JSON text or an already parsed dict

        Returns:
            ValidationResult containing validation outcome

        Raises:
            OptionsValidationError: If validation fails
        """
        try:
            parsed_data = yaml.safe_load(data) if isinstance(data, str) else data
        except yaml.YAMLError as e:
            raise OptionsValidationError(f"YAML syntax error: {str(e)}")
        if parsed_data is None:
            parsed_data = {}

        errors = sorted(self._validator.iter_errors(parsed_data), key=lambda e: [str(p) for p in e.path])
        if errors:
            first = errors[0]
            path = "/".join(str(p) for p in first.path)
            raise OptionsValidationError(first.message, path)
        return {"valid": True, "errors": [], "data": parsed_data}

    def is_valid(self, data: Any) -> bool:
        """Check if option data is valid according to the schema."""
        try:
            self.validate(data)
            return True
        except OptionsValidationError:
            return False

"""
Ledgerline Enums - Enum classes and constants for the record format.

This module provides Enum classes for genuinely constant values: the built-in
prefixes, the recognised configuration keys and the metadata kinds. Anything
that a document or an Options instance can override is resolved by the
ConfigResolver, not read from here directly.
"""

from enum import Enum, auto
from typing import Set, Tuple


# Built-in prefixes
DEFAULT_PROPERTY_PREFIX = "Properties"
DEFAULT_VALUES_PREFIX = "Values"
DEFAULT_CONVERSION_TYPE_PREFIX = "ConversionType"
DEFAULT_CONVERSION_VALUE_PREFIX = "ConversionValue"
DEFAULT_COMMENT_PREFIXES: Tuple[str, ...] = ("!", "#", ";", "//", "--")

GLOBAL_CONFIG_PREFIX = "GlobalConfig"
TYPED_CONFIG_PREFIX = "TypedConfig"

# Built-in reference columns
DEFAULT_ID_COLUMN = "Id"
DEFAULT_NAME_COLUMN = "Name"

# Value standing in for the next sequence number of a schema
PLACEHOLDER = "#"

# Line separator used when writing documents
LINE_SEPARATOR = "\r\n"


class ConfigKey(Enum):
    """Enum for the configuration keys honoured in GlobalConfig/TypedConfig lines"""
    PROPERTY_PREFIX = "PropertyPrefix"
    VALUES_PREFIX = "ValuesPrefix"
    REFERENCE_ID_COLUMN_NAME = "ReferenceIdColumnName"
    REFERENCE_NAME_COLUMN_NAME = "ReferenceNameColumnName"
    CONVERSION_TYPE_PREFIX = "ConversionTypePrefix"
    CONVERSION_VALUE_PREFIX = "ConversionValuePrefix"

    @classmethod
    def names(cls) -> Set[str]:
        """Get all recognised key names as a set for matching."""
        return {key.value for key in cls}

    @classmethod
    def is_recognised(cls, name: str) -> bool:
        """Check if a configuration key name is honoured."""
        return name in cls.names()


class MetadataKind(Enum):
    """Enum for the ways a metadata row can be materialized"""
    MAPPING = "mapping"        # key -> string dictionary
    STRUCTURED = "structured"  # instance of an external schema
    TAG = "tag"                # structured, decorating the schema itself


class MetadataScope(Enum):
    """Enum for where materialized metadata is meant to end up"""
    PER_INSTANCE = "per_instance"
    PER_SCHEMA = "per_schema"


class ParseState(Enum):
    """States a single parse run passes through, in order"""
    IDLE = auto()
    CONFIG_EXTRACTED = auto()
    PREFIXES_RESOLVED = auto()
    SCHEMAS_MATERIALIZED = auto()
    REFERENCES_RESOLVED = auto()
    DONE = auto()


class ExportFormat(Enum):
    """Enum for export format options"""
    JSON = "json"
    DATAFRAME = "dataframe"


class DataValue(Enum):
    """Enum for special textual values"""
    EMPTY_STRING = ""
    DOUBLE_QUOTED_EMPTY = '""'
    TRUE = "True"
    FALSE = "False"

    @classmethod
    def is_quoted_empty(cls, value: str) -> bool:
        """Check if a raw field is an explicitly quoted empty string"""
        return value.strip() == cls.DOUBLE_QUOTED_EMPTY.value

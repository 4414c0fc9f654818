"""
Ledgerline: several schemas, one flat document.

A line-oriented record format that packs heterogeneous schemas, their rows,
comments, metadata and configuration overrides into one comma-separated
document, and a two-pass engine that parses it back into typeless tables.

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Ledgerline contributors"
__license__ = "MIT"

# Version info tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

from .models import (
    TypelessData,
    GlobalConfig,
    TypedConfig,
    ConversionType,
    ConversionValue,
    MetadataRecord,
    ParseResult,
)
from .tokenizer import split_lines, split_line, rejoin_split_quotes
from .classifier import get_items, get_names, get_values, get_schema_names
from .config import ConfigResolver, extract_config
from .sequence import SequenceTracker
from .conversion import ConversionTables
from .codec import ScalarCodec
from .metadata import MetadataOverlay
from .references import ReferenceResolver
from .parser import RecordParser
from .writer import DocumentWriter
from .binder import SchemaDescriptor, SchemaBinder
from .exporter import JSONExporter, DataFrameExporter
from .handler import RecordHandler
from .common import BaseParser, BaseWriter, BaseExporter
from .options import (
    Options,
    SchemaDeclaration,
    MetadataDeclaration,
    ReferenceDeclaration,
)
from .defaults import (
    ConfigKey,
    MetadataKind,
    MetadataScope,
    ParseState,
    ExportFormat,
)
from .validator import (
    RecordError,
    ConfigurationConflictError,
    DuplicateConfigurationError,
    MissingSchemaDefinitionError,
    NoObjectDataError,
    EmptyDocumentError,
    OptionsValidationError,
    OptionsSchemaValidator,
    ValidationSeverity,
    OPTIONS_SCHEMA,
)

__all__ = [
    # Core components
    "RecordHandler",
    "RecordParser",
    "DocumentWriter",
    # Data models
    "TypelessData",
    "GlobalConfig",
    "TypedConfig",
    "ConversionType",
    "ConversionValue",
    "MetadataRecord",
    "ParseResult",
    # Engine components
    "split_lines",
    "split_line",
    "rejoin_split_quotes",
    "get_items",
    "get_names",
    "get_values",
    "get_schema_names",
    "ConfigResolver",
    "extract_config",
    "SequenceTracker",
    "ConversionTables",
    "ScalarCodec",
    "MetadataOverlay",
    "ReferenceResolver",
    # Binding
    "SchemaDescriptor",
    "SchemaBinder",
    # Export components
    "JSONExporter",
    "DataFrameExporter",
    # Base classes
    "BaseParser",
    "BaseWriter",
    "BaseExporter",
    # Options
    "Options",
    "SchemaDeclaration",
    "MetadataDeclaration",
    "ReferenceDeclaration",
    # Enums
    "ConfigKey",
    "MetadataKind",
    "MetadataScope",
    "ParseState",
    "ExportFormat",
    # Errors and validation
    "RecordError",
    "ConfigurationConflictError",
    "DuplicateConfigurationError",
    "MissingSchemaDefinitionError",
    "NoObjectDataError",
    "EmptyDocumentError",
    "OptionsValidationError",
    "OptionsSchemaValidator",
    "ValidationSeverity",
    "OPTIONS_SCHEMA",
    # Version information
    "__version__",
    "__author__",
    "__license__",
    "VERSION_INFO",
]

"""
Configuration resolution.

Documents can override the caller's prefixes and reference columns with
``GlobalConfig,<Key>,<Value>`` lines for the whole document, or
``TypedConfig,<Schema>,<Key>,<Value>`` lines for one schema. The resolver
answers every lookup in the same order: typed entry, global entry, caller
options, built-in default.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .classifier import get_items
from .defaults import (
    DEFAULT_ID_COLUMN,
    DEFAULT_NAME_COLUMN,
    GLOBAL_CONFIG_PREFIX,
    TYPED_CONFIG_PREFIX,
    ConfigKey,
)
from .models import GlobalConfig, TypedConfig
from .options import Options
from .validator import ConfigurationConflictError, DuplicateConfigurationError

logger = logging.getLogger(__name__)


def _recognised(name: str) -> bool:
    if ConfigKey.is_recognised(name):
        return True
    logger.debug("Ignoring unrecognised configuration key '%s'", name)
    return False


def extract_config(lines: Iterable[str]) -> Tuple[List[GlobalConfig], List[TypedConfig]]:
    """
    Read the configuration entries of a document.

    Lines too short to carry a key and a value are skipped. Unrecognised keys
    are dropped before duplicates are looked for, so they never raise.

    :param lines: Document lines
    :return: Global entries and typed entries, in document order
    :raises DuplicateConfigurationError: If a global key, or a (schema, key)
        pair, is defined twice
    """
    lines = list(lines)
    global_config: List[GlobalConfig] = []
    for fields in get_items(lines, GLOBAL_CONFIG_PREFIX):
        if len(fields) < 3 or not _recognised(fields[1]):
            continue
        entry = GlobalConfig(fields[1], fields[2])
        if any(existing.name == entry.name for existing in global_config):
            raise DuplicateConfigurationError(
                f"Duplicate global configuration '{entry.name}'", GLOBAL_CONFIG_PREFIX)
        global_config.append(entry)

    typed_config: List[TypedConfig] = []
    for fields in get_items(lines, TYPED_CONFIG_PREFIX):
        if len(fields) < 4 or not _recognised(fields[2]):
            continue
        entry = TypedConfig(fields[1], fields[2], fields[3])
        if any(existing.schema == entry.schema and existing.name == entry.name for existing in typed_config):
            raise DuplicateConfigurationError(
                f"Duplicate typed configuration '{entry.name}'", TYPED_CONFIG_PREFIX, entry.schema)
        typed_config.append(entry)

    return global_config, typed_config


class ConfigResolver:
    """Effective prefixes and reference columns for each schema."""

    def __init__(
        self,
        options: Options,
        global_config: Optional[List[GlobalConfig]] = None,
        typed_config: Optional[List[TypedConfig]] = None,
    ):
        self.options = options
        self.global_config = list(global_config or [])
        self.typed_config = list(typed_config or [])

    @classmethod
    def from_lines(cls, options: Options, lines: Iterable[str]) -> "ConfigResolver":
        global_config, typed_config = extract_config(lines)
        return cls(options, global_config, typed_config)

    def _typed(self, schema: Optional[str], key: ConfigKey) -> Optional[str]:
        if schema is None:
            return None
        for entry in self.typed_config:
            if entry.schema == schema and entry.name == key.value:
                return entry.value
        return None

    def _global(self, key: ConfigKey) -> Optional[str]:
        for entry in self.global_config:
            if entry.name == key.value:
                return entry.value
        return None

    def _lookup(self, schema: Optional[str], key: ConfigKey) -> Optional[str]:
        value = self._typed(schema, key)
        if value is None:
            value = self._global(key)
        return value

    def property_prefix(self, schema: Optional[str] = None) -> str:
        return self._lookup(schema, ConfigKey.PROPERTY_PREFIX) or self.options.property_prefix

    def value_prefix(self, schema: Optional[str] = None) -> str:
        return self._lookup(schema, ConfigKey.VALUES_PREFIX) or self.options.values_prefix

    def reference_id_column(self, schema: Optional[str] = None) -> str:
        value = self._lookup(schema, ConfigKey.REFERENCE_ID_COLUMN_NAME)
        if value:
            return value
        declaration = self.options.reference_declaration(schema) or self.options.reference_declaration()
        return declaration.id_column if declaration else DEFAULT_ID_COLUMN

    def reference_name_column(self, schema: Optional[str] = None) -> str:
        value = self._lookup(schema, ConfigKey.REFERENCE_NAME_COLUMN_NAME)
        if value:
            return value
        declaration = self.options.reference_declaration(schema) or self.options.reference_declaration()
        return declaration.name_column if declaration else DEFAULT_NAME_COLUMN

    # Conversion prefixes are document-wide; typed entries are not consulted
    def conversion_type_prefix(self) -> str:
        return self._global(ConfigKey.CONVERSION_TYPE_PREFIX) or self.options.conversion_type_prefix

    def conversion_value_prefix(self) -> str:
        return self._global(ConfigKey.CONVERSION_VALUE_PREFIX) or self.options.conversion_value_prefix

    def property_prefixes(self) -> List[str]:
        """Every property prefix in use: the global one plus typed overrides."""
        prefixes = [self.property_prefix()]
        for entry in self.typed_config:
            if entry.name == ConfigKey.PROPERTY_PREFIX.value and entry.value not in prefixes:
                prefixes.append(entry.value)
        return prefixes

    def value_prefixes(self) -> List[str]:
        """Every value prefix in use: the global one plus typed overrides."""
        prefixes = [self.value_prefix()]
        for entry in self.typed_config:
            if entry.name == ConfigKey.VALUES_PREFIX.value and entry.value not in prefixes:
                prefixes.append(entry.value)
        return prefixes

    def check_conflicts(self, schemas: Iterable[Optional[str]]) -> None:
        """
        Check the effective prefixes of each schema against each other and
        against the metadata prefixes.

        :param schemas: Schema names to check; None checks the document-wide prefixes
        :raises ConfigurationConflictError: On the first collision found
        """
        metadata_prefixes = set(self.options.metadata_prefixes)
        for schema in schemas:
            property_prefix = self.property_prefix(schema)
            value_prefix = self.value_prefix(schema)
            if property_prefix == value_prefix:
                raise ConfigurationConflictError(
                    "The property prefix and the values prefix must differ", property_prefix, schema)
            for prefix in (property_prefix, value_prefix):
                if prefix in metadata_prefixes:
                    raise ConfigurationConflictError(
                        "A metadata prefix must differ from the data prefixes", prefix, schema)

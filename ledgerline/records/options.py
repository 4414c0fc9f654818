"""
Caller-side configuration for parsing and writing record documents.

An Options instance carries the built-in prefixes a document may override,
the conversion switches, and the schema, metadata and reference declarations.
It is validated eagerly, before any text is touched, and is treated as
read-only while a parse or write is running.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .defaults import (
    DEFAULT_COMMENT_PREFIXES,
    DEFAULT_CONVERSION_TYPE_PREFIX,
    DEFAULT_CONVERSION_VALUE_PREFIX,
    DEFAULT_ID_COLUMN,
    DEFAULT_NAME_COLUMN,
    DEFAULT_PROPERTY_PREFIX,
    DEFAULT_VALUES_PREFIX,
    GLOBAL_CONFIG_PREFIX,
    TYPED_CONFIG_PREFIX,
    MetadataKind,
    MetadataScope,
)
from .validator import ConfigurationConflictError, OptionsSchemaValidator, OptionsValidationError


@dataclass(frozen=True)
class SchemaDeclaration:
    """
    A schema the caller expects, with the property names it binds.

    ``columns`` maps a property name to the document column it is read from
    when the two differ.
    """
    name: str
    property_names: Tuple[str, ...]
    columns: Dict[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "property_names", tuple(self.property_names))
        object.__setattr__(self, "columns", dict(self.columns or {}))

    def column_for(self, name: str) -> str:
        return self.columns.get(name, name)


@dataclass(frozen=True)
class MetadataDeclaration:
    """
    A metadata line kind, recognised by its prefix.

    ``schema=None`` applies the declaration to every schema. Structured and
    tag declarations need a ``descriptor`` (a SchemaDescriptor) whose fields
    include every name in ``property_names``.
    """
    prefix: str
    property_names: Tuple[str, ...]
    kind: MetadataKind = MetadataKind.MAPPING
    schema: Optional[str] = None
    descriptor: Any = None
    scope: MetadataScope = MetadataScope.PER_INSTANCE
    allow_nulls: bool = False

    def __post_init__(self):
        object.__setattr__(self, "property_names", tuple(self.property_names))
        if isinstance(self.kind, str):
            object.__setattr__(self, "kind", MetadataKind(self.kind.lower()))
        if self.kind == MetadataKind.TAG:
            object.__setattr__(self, "scope", MetadataScope.PER_SCHEMA)

    def applies_to(self, schema: str) -> bool:
        return self.schema is None or self.schema == schema


@dataclass(frozen=True)
class ReferenceDeclaration:
    """Id and name columns used to resolve ``#Schema(Name)`` references."""
    id_column: str = DEFAULT_ID_COLUMN
    name_column: str = DEFAULT_NAME_COLUMN
    schema: Optional[str] = None


@dataclass
class Options:
    """Options controlling how documents are read and written."""
    property_prefix: str = DEFAULT_PROPERTY_PREFIX
    values_prefix: str = DEFAULT_VALUES_PREFIX
    conversion_type_prefix: str = DEFAULT_CONVERSION_TYPE_PREFIX
    conversion_value_prefix: str = DEFAULT_CONVERSION_VALUE_PREFIX
    comment_prefixes: Tuple[str, ...] = DEFAULT_COMMENT_PREFIXES
    type_conversion: bool = False
    value_conversion: bool = False
    schemas: List[SchemaDeclaration] = field(default_factory=list)
    metadata: List[MetadataDeclaration] = field(default_factory=list)
    references: List[ReferenceDeclaration] = field(default_factory=list)

    def add_schema(self, declaration: SchemaDeclaration) -> "Options":
        self.schemas.append(declaration)
        return self

    def add_metadata(self, declaration: MetadataDeclaration) -> "Options":
        self.metadata.append(declaration)
        return self

    def add_reference(self, declaration: ReferenceDeclaration) -> "Options":
        self.references.append(declaration)
        return self

    def schema_declaration(self, name: str) -> Optional[SchemaDeclaration]:
        for declaration in self.schemas:
            if declaration.name == name:
                return declaration
        return None

    def reference_declaration(self, schema: Optional[str] = None) -> Optional[ReferenceDeclaration]:
        """Get the reference declaration for ``schema``; None looks up the default one."""
        for declaration in self.references:
            if declaration.schema == schema:
                return declaration
        return None

    def metadata_for(self, schema: str) -> List[MetadataDeclaration]:
        """Metadata declarations that apply to ``schema``, in declaration order."""
        return [d for d in self.metadata if d.applies_to(schema)]

    @property
    def metadata_prefixes(self) -> List[str]:
        return [d.prefix for d in self.metadata]

    def validate(self) -> None:
        """
        Check the options for contradictions.

        Raises:
            ConfigurationConflictError: If two prefixes collide, a metadata
                declaration is malformed, or a schema is declared twice
        """
        if self.property_prefix == self.values_prefix:
            raise ConfigurationConflictError(
                "The property prefix and the values prefix must differ", self.property_prefix)

        reserved = {
            self.property_prefix,
            self.values_prefix,
            self.conversion_type_prefix,
            self.conversion_value_prefix,
            GLOBAL_CONFIG_PREFIX,
            TYPED_CONFIG_PREFIX,
        }
        seen = set()
        for declaration in self.metadata:
            if declaration.prefix in reserved:
                raise ConfigurationConflictError(
                    "A metadata prefix must differ from the data and configuration prefixes",
                    declaration.prefix, declaration.schema)
            if declaration.prefix in seen:
                raise ConfigurationConflictError(
                    "Metadata prefixes must be unique", declaration.prefix, declaration.schema)
            seen.add(declaration.prefix)
            self._validate_descriptor(declaration)

        names = [d.name for d in self.schemas]
        for name in names:
            if names.count(name) > 1:
                raise ConfigurationConflictError("Schema declared more than once", schema=name)
        for declaration in self.schemas:
            unknown = [name for name in declaration.columns if name not in declaration.property_names]
            if unknown:
                raise ConfigurationConflictError(
                    f"Column mapping names unknown properties {unknown}", schema=declaration.name)

    @staticmethod
    def _validate_descriptor(declaration: MetadataDeclaration) -> None:
        if declaration.kind == MetadataKind.MAPPING:
            return
        if declaration.descriptor is None:
            raise ConfigurationConflictError(
                f"A {declaration.kind.value} metadata declaration needs a descriptor",
                declaration.prefix, declaration.schema)
        fields = declaration.descriptor.fields
        missing = [name for name in declaration.property_names if name not in fields]
        if missing:
            raise ConfigurationConflictError(
                f"Properties {missing} not found on '{declaration.descriptor.name}'",
                declaration.prefix, declaration.schema)

    # Loading
    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], descriptors: Optional[Dict[str, Any]] = None) -> "Options":
        """
        Build options from a plain mapping, as found in an options file.

        :param data: Mapping conforming to ``OPTIONS_SCHEMA``
        :param descriptors: SchemaDescriptors by name, for structured and tag metadata
        :return: Validated options
        :raises OptionsValidationError: If the mapping does not conform or names an unknown descriptor
        """
        data = OptionsSchemaValidator().validate(data or {})["data"]
        descriptors = descriptors or {}

        prefixes = data.get("prefixes", {})
        conversions = data.get("conversions", {})
        options = cls(
            property_prefix=prefixes.get("properties", DEFAULT_PROPERTY_PREFIX),
            values_prefix=prefixes.get("values", DEFAULT_VALUES_PREFIX),
            conversion_type_prefix=prefixes.get("conversion_type", DEFAULT_CONVERSION_TYPE_PREFIX),
            conversion_value_prefix=prefixes.get("conversion_value", DEFAULT_CONVERSION_VALUE_PREFIX),
            comment_prefixes=tuple(data.get("comment_prefixes", DEFAULT_COMMENT_PREFIXES)),
            type_conversion=conversions.get("types", False),
            value_conversion=conversions.get("values", False),
        )

        for name, entry in data.get("schemas", {}).items():
            if isinstance(entry, dict):
                options.add_schema(SchemaDeclaration(name, tuple(entry["properties"]), entry.get("columns", {})))
            else:
                options.add_schema(SchemaDeclaration(name, tuple(entry)))

        for index, entry in enumerate(data.get("metadata", [])):
            descriptor = None
            if "descriptor" in entry:
                descriptor = descriptors.get(entry["descriptor"])
                if descriptor is None:
                    raise OptionsValidationError(
                        f"Unknown descriptor '{entry['descriptor']}'", f"metadata/{index}/descriptor")
            options.add_metadata(MetadataDeclaration(
                prefix=entry["prefix"],
                property_names=tuple(entry["properties"]),
                kind=MetadataKind(entry.get("kind", MetadataKind.MAPPING.value)),
                schema=entry.get("schema"),
                descriptor=descriptor,
                allow_nulls=entry.get("allow_nulls", False),
            ))

        for entry in data.get("references", []):
            options.add_reference(ReferenceDeclaration(entry["id"], entry["name"], entry.get("schema")))

        options.validate()
        return options

    @classmethod
    def from_yaml(cls, source: Union[str, Path], descriptors: Optional[Dict[str, Any]] = None) -> "Options":
        """Build options from a YAML file path or YAML text."""
        text = _read_source(source)
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise OptionsValidationError(f"YAML syntax error: {str(e)}")
        return cls.from_dict(data, descriptors)

    @classmethod
    def from_json(cls, source: Union[str, Path], descriptors: Optional[Dict[str, Any]] = None) -> "Options":
        """Build options from a JSON file path or JSON text."""
        text = _read_source(source)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise OptionsValidationError(f"Invalid JSON: {str(e)}")
        return cls.from_dict(data, descriptors)

    @classmethod
    def from_file(cls, path: Union[str, Path], descriptors: Optional[Dict[str, Any]] = None) -> "Options":
        """Build options from a file, choosing the loader by extension."""
        if str(path).lower().endswith(".json"):
            return cls.from_json(Path(path), descriptors)
        return cls.from_yaml(Path(path), descriptors)


def _read_source(source: Union[str, Path]) -> str:
    if isinstance(source, Path):
        return source.read_text(encoding="utf-8")
    if "\n" not in source and source.lower().endswith((".yaml", ".yml", ".json")):
        return Path(source).read_text(encoding="utf-8")
    return source

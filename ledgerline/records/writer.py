"""
Ledgerline document writer.

DocumentWriter builds a document section by section and serializes it with
CRLF line separators. Each schema block (metadata lines, property line, value
lines) is followed by one blank line. Comments written here are for human
readers only; they are dropped again when the document is parsed.
"""

import logging
from typing import Any, Dict, IO, Iterable, List, Mapping, Optional, Sequence, Union

from .codec import ScalarCodec
from .common import BaseWriter
from .config import ConfigResolver
from .conversion import ConversionTables
from .defaults import GLOBAL_CONFIG_PREFIX, LINE_SEPARATOR, TYPED_CONFIG_PREFIX, ConfigKey, MetadataKind
from .models import GlobalConfig, MetadataRecord, ParseResult, TypedConfig, TypelessData
from .options import MetadataDeclaration, Options

logger = logging.getLogger(__name__)

ConfigEntries = Union[Mapping[str, str], Iterable[GlobalConfig], Iterable[TypedConfig]]


def _config_pairs(entries: ConfigEntries) -> List[tuple]:
    if isinstance(entries, Mapping):
        return list(entries.items())
    return [(entry.name, entry.value) for entry in entries]


def _first_wins(entries: Iterable[Any]) -> Dict[str, str]:
    table: Dict[str, str] = {}
    for entry in entries:
        table.setdefault(entry.original, entry.converted)
    return table


class DocumentWriter(BaseWriter):
    """
    Writes record documents.

    Section methods return the writer so calls can be chained::

        text = (DocumentWriter(options)
                .comment("!", "Inventory")
                .typeless_data("Foo", ["Id", "Name"], [["1", "Alpha"]])
                .serialize())
    """

    def __init__(self, options: Optional[Options] = None, codec: Optional[ScalarCodec] = None):
        """
        Initialize the writer.

        :param options: Prefixes and metadata declarations used for writing
        :param codec: Scalar codec used for typed values
        :raises ConfigurationConflictError: If the options contradict each other
        """
        self.options = options or Options()
        self.options.validate()
        self.codec = codec or ScalarCodec()
        self._lines: List[str] = []

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def clear(self) -> "DocumentWriter":
        self._lines.clear()
        return self

    # Sections
    def comment(self, prefix: str, *lines: str) -> "DocumentWriter":
        for line in lines:
            self._lines.append(f"{prefix} {line}")
        return self

    def blank_line(self, count: int = 1) -> "DocumentWriter":
        self._lines.extend([""] * count)
        return self

    def global_config(self, entries: ConfigEntries) -> "DocumentWriter":
        """Write GlobalConfig lines; unrecognised keys are dropped."""
        for name, value in _config_pairs(entries):
            if ConfigKey.is_recognised(name):
                self._lines.append(f"{GLOBAL_CONFIG_PREFIX},{name},{value}")
            else:
                logger.debug("Not writing unrecognised configuration key '%s'", name)
        return self

    def typed_config(self, schema: str, entries: ConfigEntries) -> "DocumentWriter":
        """Write TypedConfig lines for one schema; unrecognised keys are dropped."""
        for name, value in _config_pairs(entries):
            if ConfigKey.is_recognised(name):
                self._lines.append(f"{TYPED_CONFIG_PREFIX},{schema},{name},{value}")
        return self

    def type_conversion(self, entries: Mapping[str, str], prefix: Optional[str] = None) -> "DocumentWriter":
        prefix = prefix or self.options.conversion_type_prefix
        for original, converted in entries.items():
            self._lines.append(f'{prefix},"{original}","{converted}"')
        return self

    def value_conversion(self, entries: Mapping[str, str], prefix: Optional[str] = None) -> "DocumentWriter":
        prefix = prefix or self.options.conversion_value_prefix
        for original, converted in entries.items():
            self._lines.append(f'{prefix},"{original}","{converted}"')
        return self

    def metadata(self, schema: str, prefix: str, records: Iterable[Any]) -> "DocumentWriter":
        """
        Write metadata lines.

        :param schema: Schema name as written in the document
        :param prefix: Metadata prefix
        :param records: MetadataRecords, mappings, or structured objects
        """
        declaration = self._declaration(prefix)
        for record in records:
            value = record.value if isinstance(record, MetadataRecord) else record
            fields = self._metadata_fields(declaration, value)
            self._lines.append(",".join([prefix, schema] + fields))
        return self

    def typeless_data(self, schema: str, names: Sequence[str], rows: Iterable[Sequence[str]],
                      property_prefix: Optional[str] = None, values_prefix: Optional[str] = None) -> "DocumentWriter":
        """Write a property line, quoted value lines and the closing blank line."""
        property_prefix = property_prefix or self.options.property_prefix
        values_prefix = values_prefix or self.options.values_prefix
        self._lines.append(",".join([property_prefix, schema] + list(names)))
        for row in rows:
            self._lines.append(",".join([values_prefix, schema] + [f'"{value}"' for value in row]))
        return self.blank_line()

    def typed_data(self, descriptor: Any, objects: Iterable[Any],
                   schema: Optional[str] = None) -> "DocumentWriter":
        """
        Write objects described by a SchemaDescriptor.

        Values are rendered by the scalar codec, so strings are quoted and
        numbers, booleans and enum members are not.
        """
        schema = schema or descriptor.name
        names = list(descriptor.fields)
        self._lines.append(",".join([self.options.property_prefix, schema] + descriptor.column_names))
        for obj in objects:
            values = descriptor.extract(obj)
            fields = [self.codec.encode(values[name], descriptor.fields[name]) for name in names]
            self._lines.append(",".join([self.options.values_prefix, schema] + fields))
        return self.blank_line()

    def write_document(
        self,
        data: Union[ParseResult, Mapping[str, TypelessData]],
        metadata: Optional[Mapping[str, List[MetadataRecord]]] = None,
    ) -> "DocumentWriter":
        """
        Write a whole parse result.

        Configuration and conversion entries carried by a ParseResult are
        written first and honoured for the prefixes of each schema block.
        """
        resolver = ConfigResolver(self.options)
        tables = ConversionTables(convert_types=self.options.type_conversion)
        if isinstance(data, ParseResult):
            metadata = data.metadata if metadata is None else metadata
            resolver = ConfigResolver(self.options, data.global_config, data.typed_config)
            tables = ConversionTables(data.conversion_types, data.conversion_values,
                                      convert_types=self.options.type_conversion)
            self._write_config(data, resolver)
            data = data.data
        metadata = metadata or {}

        for stored, table in data.items():
            schema = tables.revert_type(stored)
            records = metadata.get(stored, [])
            for prefix in self._prefixes_in_order(records):
                self.metadata(schema, prefix, [r for r in records if r.prefix == prefix])
            declaration = self.options.schema_declaration(stored)
            names = [declaration.column_for(name) for name in table.names] if declaration else table.names
            self.typeless_data(schema, names, table.rows,
                               resolver.property_prefix(schema), resolver.value_prefix(schema))
        return self

    def _write_config(self, result: ParseResult, resolver: ConfigResolver) -> None:
        wrote = False
        if result.global_config:
            self.global_config(result.global_config)
            wrote = True
        schemas = []
        for entry in result.typed_config:
            if entry.schema not in schemas:
                schemas.append(entry.schema)
        for schema in schemas:
            self.typed_config(schema, [e for e in result.typed_config if e.schema == schema])
            wrote = True
        if result.conversion_types:
            self.type_conversion(_first_wins(result.conversion_types),
                                 resolver.conversion_type_prefix())
            wrote = True
        if result.conversion_values:
            self.value_conversion(_first_wins(result.conversion_values),
                                  resolver.conversion_value_prefix())
            wrote = True
        if wrote:
            self.blank_line()

    def _declaration(self, prefix: str) -> Optional[MetadataDeclaration]:
        for declaration in self.options.metadata:
            if declaration.prefix == prefix:
                return declaration
        return None

    def _prefixes_in_order(self, records: List[MetadataRecord]) -> List[str]:
        prefixes = []
        for record in records:
            if record.prefix not in prefixes:
                prefixes.append(record.prefix)
        return prefixes

    def _metadata_fields(self, declaration: Optional[MetadataDeclaration], value: Any) -> List[str]:
        if isinstance(value, Mapping):
            names = declaration.property_names if declaration else list(value)
            return [self._quote(value.get(name)) for name in names]
        if declaration is None or declaration.kind == MetadataKind.MAPPING or declaration.descriptor is None:
            raise ValueError("Structured metadata needs a declaration with a descriptor to be written")
        descriptor = declaration.descriptor
        values = descriptor.extract(value)
        return [self.codec.encode(values.get(name), descriptor.fields[name]) for name in declaration.property_names]

    @staticmethod
    def _quote(value: Optional[str]) -> str:
        if value is None:
            return ""
        return f'"{value}"'

    # Output
    def serialize(self) -> str:
        """Return the document text with CRLF line separators."""
        if not self._lines:
            return ""
        return LINE_SEPARATOR.join(self._lines) + LINE_SEPARATOR

    def write(self, file_obj: IO, data: Any = None) -> None:
        """
        Write the document to a file object.

        :param file_obj: The file object to write to
        :param data: A ParseResult or mapping of TypelessData to append first
        :return: None
        """
        if data is not None:
            self.write_document(data)
        file_obj.write(self.serialize())

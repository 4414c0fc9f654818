"""
The record engine.

Parsing runs in two passes. The first reads configuration and conversion
lines, which decide the prefixes every other line is classified with. The
second materializes each schema's property names, value rows and metadata,
and finally rewrites symbolic references across all schemas.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .classifier import get_items, get_schema_names, get_values
from .codec import ScalarCodec
from .common import BaseParser
from .config import ConfigResolver
from .conversion import ConversionTables
from .defaults import ParseState
from .metadata import MetadataOverlay
from .models import ConversionType, ConversionValue, MetadataRecord, ParseResult, TypelessData
from .options import Options
from .references import ReferenceResolver
from .sequence import SequenceTracker
from .tokenizer import split_lines
from .validator import EmptyDocumentError, MissingSchemaDefinitionError

logger = logging.getLogger(__name__)


def extract_conversions(lines: List[str], type_prefix: str, value_prefix: str) -> Tuple[List[ConversionType], List[ConversionValue]]:
    """
    Read the conversion entries of a document.

    Surrounding whitespace and quotes are stripped from both sides of each
    entry; lines without both sides are skipped.
    """
    decode = ScalarCodec.decode_text
    types = [ConversionType(decode(f[1]), decode(f[2])) for f in get_items(lines, type_prefix) if len(f) >= 3]
    values = [ConversionValue(decode(f[1]), decode(f[2])) for f in get_items(lines, value_prefix) if len(f) >= 3]
    return types, values


class RecordParser(BaseParser):
    """
    Parses documents into TypelessData tables and metadata records.

    The parser itself only holds options. Each ``parse`` call builds a fresh
    sequence tracker, conversion tables, metadata overlay and reference
    resolver, so parsing the same text twice gives identical results.
    """

    def __init__(self, options: Optional[Options] = None, codec: Optional[ScalarCodec] = None):
        super().__init__(options)
        self.codec = codec or ScalarCodec()
        self.state = ParseState.IDLE

    def _advance(self, state: ParseState) -> None:
        logger.debug("Parse state %s -> %s", self.state.name, state.name)
        self.state = state

    def parse(self, text: str) -> ParseResult:
        """
        Parse a document.

        :param text: The full document text
        :return: Schemas by (converted) name, with their metadata
        :raises EmptyDocumentError: If the text is empty
        :raises ConfigurationConflictError: If the document's configuration
            makes prefixes collide, or defines an entry twice
        :raises MissingSchemaDefinitionError: If value rows exist for a schema
            without a property block
        """
        self.state = ParseState.IDLE
        if not text or not text.strip():
            raise EmptyDocumentError()

        lines = split_lines(text, self.options.comment_prefixes)

        # Pass 1: configuration and conversion entries
        resolver = ConfigResolver.from_lines(self.options, lines)
        conversion_types, conversion_values = extract_conversions(
            lines, resolver.conversion_type_prefix(), resolver.conversion_value_prefix())
        tables = ConversionTables(
            conversion_types,
            conversion_values,
            convert_types=self.options.type_conversion,
            convert_values=self.options.value_conversion,
        )
        self._advance(ParseState.CONFIG_EXTRACTED)

        schemas = self._discover_schemas(lines, resolver, tables)
        resolver.check_conflicts([None] + schemas)
        self._advance(ParseState.PREFIXES_RESOLVED)

        # Pass 2: schemas and metadata
        tracker = SequenceTracker()
        tracker.initialize(*(tables.convert_type(schema) for schema in schemas))
        overlay = MetadataOverlay(self.options, tables, tracker, self.codec)

        data: Dict[str, TypelessData] = {}
        metadata: Dict[str, List[MetadataRecord]] = {}
        aliases: Dict[str, str] = {}
        for schema in schemas:
            stored = tables.convert_type(schema)
            table = self._materialize(schema, stored, lines, resolver, tables, tracker)
            if table is None:
                continue
            data[stored] = table
            aliases[stored] = schema
            records = overlay.attach(schema, lines)
            if records:
                metadata[stored] = records
        self._advance(ParseState.SCHEMAS_MATERIALIZED)

        resolved = ReferenceResolver(resolver, aliases).resolve(data)
        logger.debug("Resolved %d reference(s)", resolved)
        self._advance(ParseState.REFERENCES_RESOLVED)

        result = ParseResult(
            data=data,
            metadata=metadata,
            global_config=resolver.global_config,
            typed_config=resolver.typed_config,
            conversion_types=conversion_types,
            conversion_values=conversion_values,
        )
        self._advance(ParseState.DONE)
        return result

    def _discover_schemas(self, lines: List[str], resolver: ConfigResolver, tables: ConversionTables) -> List[str]:
        """
        Get the document names of the schemas to materialize.

        Declared schemas are named by their stored (converted) name and mapped
        back to the document name here.
        """
        if self.options.schemas:
            return [tables.revert_type(declaration.name) for declaration in self.options.schemas]

        with_names = get_schema_names(lines, resolver.property_prefixes(), resolver.property_prefix)
        with_values = get_schema_names(lines, resolver.value_prefixes(), resolver.value_prefix)
        for schema in with_values:
            if schema not in with_names:
                raise MissingSchemaDefinitionError(schema)
        return with_names

    def _materialize(
        self,
        schema: str,
        stored: str,
        lines: List[str],
        resolver: ConfigResolver,
        tables: ConversionTables,
        tracker: SequenceTracker,
    ) -> Optional[TypelessData]:
        property_lines = get_items(lines, resolver.property_prefix(schema), schema)
        values = get_values(lines, resolver.value_prefix(schema), schema)

        if not property_lines:
            if values:
                raise MissingSchemaDefinitionError(schema)
            return None
        if len(property_lines) > 1:
            logger.warning("Schema '%s' has %d property blocks; using the first", schema, len(property_lines))
        document_names = property_lines[0][2:]

        declaration = self.options.schema_declaration(stored)
        names = list(declaration.property_names) if declaration else list(document_names)
        columns = [declaration.column_for(name) for name in names] if declaration else names
        positions = [document_names.index(column) if column in document_names else -1 for column in columns]

        rows = []
        for fields in values:
            row = []
            for position in positions:
                raw = fields[position] if 0 <= position < len(fields) else ""
                if self.codec.is_placeholder(raw):
                    row.append(str(tracker.next(stored)))
                else:
                    row.append(tables.convert_value(self.codec.decode_text(raw)))
            rows.append(row)

        logger.debug("Materialized '%s' as '%s': %d row(s)", schema, stored, len(rows))
        return TypelessData(stored, names, rows)

"""
Metadata overlay.

Metadata lines look like value lines but start with a caller-declared prefix:
``<Prefix>,<Schema>,<Field1>,...``. Each declaration decides how its rows are
materialized: as a key/value mapping, as an instance of an external schema,
or as a tag that decorates the schema itself.
"""

import logging
from typing import Any, Dict, List, Optional

from .classifier import get_values
from .codec import ScalarCodec
from .conversion import ConversionTables
from .defaults import DataValue, MetadataKind
from .models import MetadataRecord
from .options import MetadataDeclaration, Options
from .sequence import SequenceTracker

logger = logging.getLogger(__name__)


class MetadataOverlay:
    """
    Builds the metadata records of a schema for one parse run.

    The tracker and tables are owned by the run that created the overlay;
    structured rows draw their placeholder values from a counter keyed by the
    declaration prefix.
    """

    def __init__(
        self,
        options: Options,
        tables: Optional[ConversionTables] = None,
        tracker: Optional[SequenceTracker] = None,
        codec: Optional[ScalarCodec] = None,
    ):
        self.options = options
        self.tables = tables or ConversionTables()
        self.tracker = tracker or SequenceTracker()
        self.codec = codec or ScalarCodec()
        self.tracker.initialize(*options.metadata_prefixes)

    def attach(self, schema: str, lines: List[str]) -> List[MetadataRecord]:
        """
        Materialize all metadata rows for ``schema``.

        :param schema: The schema name as written in the document
        :param lines: Document lines
        :return: Records in declaration order, then row order
        """
        records: List[MetadataRecord] = []
        for declaration in self.options.metadata_for(schema):
            for fields in get_values(lines, declaration.prefix, schema):
                value = self._materialize(declaration, fields)
                records.append(MetadataRecord(declaration.prefix, declaration.kind, declaration.scope, value))
        if records:
            logger.debug("Attached %d metadata record(s) to '%s'", len(records), schema)
        return records

    def _materialize(self, declaration: MetadataDeclaration, fields: List[str]) -> Any:
        if declaration.kind == MetadataKind.MAPPING:
            return self._mapping(declaration, fields)
        return self._structured(declaration, fields)

    def _mapping(self, declaration: MetadataDeclaration, fields: List[str]) -> Dict[str, Optional[str]]:
        empty = None if declaration.allow_nulls else DataValue.EMPTY_STRING.value
        mapping: Dict[str, Optional[str]] = {}
        for index, name in enumerate(declaration.property_names):
            if index >= len(fields):
                mapping[name] = empty
                continue
            raw = fields[index]
            if DataValue.is_quoted_empty(raw):
                mapping[name] = DataValue.EMPTY_STRING.value
            elif not raw.strip():
                mapping[name] = empty
            else:
                mapping[name] = self.tables.convert_value(self.codec.decode_text(raw))
        return mapping

    def _structured(self, declaration: MetadataDeclaration, fields: List[str]) -> Any:
        descriptor = declaration.descriptor
        values: Dict[str, Any] = {}
        for index, name in enumerate(declaration.property_names):
            raw = fields[index] if index < len(fields) else ""
            if not self.codec.is_placeholder(raw):
                raw = self.tables.convert_value(self.codec.decode_text(raw))
            values[name] = self.codec.decode(raw, descriptor.fields[name], declaration.prefix, self.tracker)
        return descriptor.build(values)

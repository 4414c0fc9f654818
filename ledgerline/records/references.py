"""
Symbolic reference resolution.

A field written as ``#Schema(Name)`` (the name may be quoted) stands for the
id of the row of ``Schema`` whose name column equals ``Name``. References are
rewritten once every schema of the document is materialized, so they may
point forwards, backwards or into their own schema.
"""

import logging
import re
from typing import Dict, Optional

from .config import ConfigResolver
from .models import TypelessData

logger = logging.getLogger(__name__)

REFERENCE_PATTERN = re.compile(r'^#(?P<schema>[^(),]+)\((?P<name>.*)\)$')


class ReferenceResolver:
    """Rewrites reference fields to the id of the row they name."""

    def __init__(self, resolver: ConfigResolver, aliases: Optional[Dict[str, str]] = None):
        """
        :param resolver: Supplies the id and name columns of each schema
        :param aliases: Stored schema name -> document schema name, used to
            look up typed configuration of renamed schemas
        """
        self.resolver = resolver
        self.aliases = aliases or {}

    def resolve(self, data: Dict[str, TypelessData]) -> int:
        """
        Resolve references in place.

        :param data: All schema tables of the run, by stored name
        :return: The number of fields rewritten
        """
        resolved = 0
        for table in data.values():
            for row in table.rows:
                for index, field in enumerate(row):
                    replacement = self.lookup(field, data)
                    if replacement is not None:
                        row[index] = replacement
                        resolved += 1
        return resolved

    def lookup(self, field: str, data: Dict[str, TypelessData]) -> Optional[str]:
        """Get the id a reference field stands for, or None when it does not resolve."""
        match = REFERENCE_PATTERN.match(field.strip())
        if match is None:
            return None
        schema = match.group("schema").strip()
        name = match.group("name").strip().strip('"').strip()

        target = data.get(schema)
        if target is None:
            logger.debug("Unresolved reference %s: unknown schema", field)
            return None

        config_schema = self.aliases.get(schema, schema)
        id_index = target.index_of(self.resolver.reference_id_column(config_schema))
        name_index = target.index_of(self.resolver.reference_name_column(config_schema))
        if id_index < 0 or name_index < 0:
            logger.debug("Unresolved reference %s: missing id or name column", field)
            return None

        for row in target.rows:
            if max(id_index, name_index) < len(row) and row[name_index] == name:
                return row[id_index]
        logger.debug("Unresolved reference %s: no matching row", field)
        return None

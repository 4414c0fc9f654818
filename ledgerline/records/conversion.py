from typing import List, Optional
from .models import ConversionType, ConversionValue


class ConversionTables:
    """
    Exact-match rename tables for schema names and scalar values.

    Each table only applies when its flag is on; otherwise lookups are the
    identity. When several entries share an original, the first one wins.
    """

    def __init__(
        self,
        types: Optional[List[ConversionType]] = None,
        values: Optional[List[ConversionValue]] = None,
        convert_types: bool = False,
        convert_values: bool = False,
    ):
        """
        Initialize the tables.

        :param types: Schema name renames, in document order
        :param values: Value renames, in document order
        :param convert_types: Whether schema names are renamed
        :param convert_values: Whether values are renamed
        """
        self.types = list(types or [])
        self.values = list(values or [])
        self.convert_types = convert_types
        self.convert_values = convert_values

    def convert_type(self, name: str) -> str:
        if not self.convert_types:
            return name
        for entry in self.types:
            if entry.original == name:
                return entry.converted
        return name

    def convert_value(self, value: str) -> str:
        if not self.convert_values:
            return value
        for entry in self.values:
            if entry.original == value:
                return entry.converted
        return value

    def revert_type(self, name: str) -> str:
        """Map a stored schema name back to its document name."""
        if not self.convert_types:
            return name
        for entry in self.types:
            if entry.converted == name:
                return entry.original
        return name

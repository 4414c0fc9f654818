from typing import Dict, Tuple, List, Any, Union, Optional, Iterator
from dataclasses import dataclass, field
from abc import ABC, abstractmethod
from .defaults import MetadataKind, MetadataScope
from .validator import NoObjectDataError


class DataNode(ABC):
    """Abstract base class for all named nodes of a parse result."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the name of the node."""
        pass

    def __repr__(self):
        return f"{self.__class__.__name__}(name={self.name})"


class TypelessData(DataNode):
    """
    The schema-less table of one schema: ordered property names plus rows of
    raw string fields, positionally aligned with the names.

    Rows are accessed by ``data[row]``, single fields by ``data[row, field]``
    where *field* is either a column index or a property name.
    """

    def __init__(self, name: str, names: Optional[List[str]] = None,
                 rows: Optional[List[List[str]]] = None):
        """
        Initialize a schema table.

        :param name: The schema name the table is stored under
        :param names: Ordered property names
        :param rows: Rows of string fields
        """
        self._name = name
        self.names: List[str] = list(names or [])
        self.rows: List[List[str]] = [list(row) for row in (rows or [])]

    @property
    def name(self) -> str:
        """Read-only access to the schema name."""
        return self._name

    def index_of(self, property_name: str) -> int:
        """Get the column index of a property, or -1 when the schema lacks it."""
        try:
            return self.names.index(property_name)
        except ValueError:
            return -1

    def column(self, property_name: str) -> List[str]:
        """
        Get all values of one property, in row order.

        :param property_name: The property to fetch
        :return: Values of the column
        :raises KeyError: If the schema has no such property
        """
        index = self.index_of(property_name)
        if index < 0:
            raise KeyError(f"Property '{property_name}' not found in schema '{self._name}'")
        return [row[index] for row in self.rows]

    def get(self) -> Tuple[List[str], List[List[str]]]:
        """Return the ``(names, rows)`` pair handed to binders."""
        return self.names, self.rows

    def __getitem__(self, key: Union[int, Tuple[int, Union[int, str]]]) -> Union[str, List[str]]:
        if isinstance(key, tuple):
            row, column = key
            if isinstance(column, str):
                index = self.index_of(column)
                if index < 0:
                    raise KeyError(f"Property '{column}' not found in schema '{self._name}'")
                column = index
            return self.rows[row][column]
        return self.rows[key]

    def __setitem__(self, key: Tuple[int, int], value: str) -> None:
        row, column = key
        self.rows[row][column] = value

    def __iter__(self) -> Iterator[List[str]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypelessData):
            return NotImplemented
        return (self._name, self.names, self.rows) == (other._name, other.names, other.rows)

    def __repr__(self):
        return f"TypelessData(name={self._name}, names={self.names}, rows={len(self.rows)})"


@dataclass(frozen=True)
class GlobalConfig:
    """A document-scoped configuration entry."""
    name: str
    value: str


@dataclass(frozen=True)
class TypedConfig:
    """A configuration entry that applies to one schema only."""
    schema: str
    name: str
    value: str


@dataclass(frozen=True)
class ConversionType:
    """Rename of a schema name between document and stored key."""
    original: str
    converted: str


@dataclass(frozen=True)
class ConversionValue:
    """Rename of an exact scalar value."""
    original: str
    converted: str


@dataclass
class MetadataRecord:
    """One materialized metadata row."""
    prefix: str
    kind: MetadataKind
    scope: MetadataScope
    value: Any

    @property
    def is_tag(self) -> bool:
        return self.scope == MetadataScope.PER_SCHEMA


@dataclass
class ParseResult:
    """
    Output of one parse run.

    ``data`` maps each (converted) schema name to its TypelessData and
    ``metadata`` maps schema names to their metadata records in declaration
    order, then row order. The configuration and conversion entries extracted
    from the document are kept so that a result can be written back.
    """
    data: Dict[str, TypelessData] = field(default_factory=dict)
    metadata: Dict[str, List[MetadataRecord]] = field(default_factory=dict)
    global_config: List[GlobalConfig] = field(default_factory=list)
    typed_config: List[TypedConfig] = field(default_factory=list)
    conversion_types: List[ConversionType] = field(default_factory=list)
    conversion_values: List[ConversionValue] = field(default_factory=list)

    @property
    def schemas(self) -> List[str]:
        """Schema names in the order they were materialized."""
        return list(self.data)

    def __getitem__(self, schema: str) -> TypelessData:
        if schema not in self.data:
            raise NoObjectDataError(schema)
        return self.data[schema]

    def __contains__(self, schema: str) -> bool:
        return schema in self.data

    def __iter__(self) -> Iterator[TypelessData]:
        return iter(self.data.values())

    def __len__(self) -> int:
        return len(self.data)

    def metadata_for(self, schema: str) -> List[MetadataRecord]:
        """Get the metadata records of a schema, or an empty list."""
        return self.metadata.get(schema, [])

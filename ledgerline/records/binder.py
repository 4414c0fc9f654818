"""
Materializer for binding typeless rows onto Python classes.

Binding is explicit: a SchemaDescriptor names the schema, the field types and
the callable that builds an instance, and a SchemaBinder keeps a registry of
descriptors built once at startup. No attribute or base-class inspection
happens while binding.
"""

import dataclasses
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from .codec import ScalarCodec
from .models import ParseResult, TypelessData
from .validator import NoObjectDataError


def _attribute_factory(cls: type) -> Callable[..., Any]:
    def factory(**values: Any) -> Any:
        obj = cls()
        for name, value in values.items():
            setattr(obj, name, value)
        return obj
    return factory


@dataclass
class SchemaDescriptor:
    """
    Describes how to build instances of one schema.

    :param name: Schema name the descriptor binds
    :param factory: Callable taking field values as keyword arguments
    :param fields: Field name -> type, in property order
    :param columns: Field name -> document column, for fields stored under another name
    """
    name: str
    factory: Callable[..., Any]
    fields: Dict[str, Any]
    columns: Dict[str, str] = field(default_factory=dict)

    def column_for(self, field_name: str) -> str:
        return self.columns.get(field_name, field_name)

    @property
    def column_names(self) -> List[str]:
        return [self.column_for(field_name) for field_name in self.fields]

    def build(self, values: Dict[str, Any]) -> Any:
        return self.factory(**values)

    def extract(self, obj: Any) -> Dict[str, Any]:
        """Read the described fields from an instance."""
        return {name: getattr(obj, name, None) for name in self.fields}

    @classmethod
    def from_class(cls, klass: type, name: Optional[str] = None,
                   columns: Optional[Dict[str, str]] = None) -> "SchemaDescriptor":
        """
        Build a descriptor from a dataclass or a class with annotated attributes.

        Dataclasses are constructed with keyword arguments; other classes are
        constructed without arguments and have their attributes set.
        """
        hints = typing.get_type_hints(klass)
        if dataclasses.is_dataclass(klass):
            fields = {f.name: hints.get(f.name, str) for f in dataclasses.fields(klass)}
            factory = klass
        else:
            fields = {field_name: hint for field_name, hint in hints.items() if not field_name.startswith("_")}
            factory = _attribute_factory(klass)
        return cls(name or klass.__name__, factory, fields, dict(columns or {}))


class SchemaBinder:
    """A registry of schema descriptors that binds parse results to objects."""

    def __init__(self, codec: Optional[ScalarCodec] = None):
        self.codec = codec or ScalarCodec()
        self.descriptors: Dict[str, SchemaDescriptor] = {}
        self.instance_metadata: Dict[str, List[Any]] = {}
        self.tags: Dict[str, List[Any]] = {}

    def register(self, descriptor: SchemaDescriptor) -> "SchemaBinder":
        """
        Registers a descriptor for its schema name.

        :param descriptor: The descriptor to register
        :type descriptor: SchemaDescriptor
        :return: The binder, for chaining
        :rtype: SchemaBinder
        """
        self.descriptors[descriptor.name] = descriptor
        return self

    def get_descriptor(self, name: str) -> Optional[SchemaDescriptor]:
        """
        Retrieves the descriptor registered for a schema.

        :param name: The schema name
        :type name: str
        :return: The descriptor, or None if none is registered
        :rtype: Optional[SchemaDescriptor]
        """
        return self.descriptors.get(name)

    def bind(self, result: ParseResult) -> Dict[str, List[Any]]:
        """Bind every registered schema present in ``result``."""
        return {name: self.bind_schema(result, name) for name in result.data if name in self.descriptors}

    def bind_schema(self, result: ParseResult, name: str) -> List[Any]:
        """
        Bind the rows of one schema and route its metadata.

        Per-instance metadata values are stored in ``instance_metadata`` and
        per-schema (tag) values in ``tags``, both keyed by schema name.

        :raises NoObjectDataError: If the schema is not in the result or has
            no registered descriptor
        """
        table = result[name]
        descriptor = self.descriptors.get(name)
        if descriptor is None:
            raise NoObjectDataError(name)

        objects = [self.materialize(table.names, row, descriptor) for row in table.rows]

        for record in result.metadata_for(name):
            target = self.tags if record.is_tag else self.instance_metadata
            target.setdefault(name, []).append(record.value)
        return objects

    def materialize(self, names: List[str], row: List[str], descriptor: SchemaDescriptor) -> Any:
        """
        Build one instance from a row aligned with ``names``.

        Each field is read from its mapped column, or from a column carrying
        the field name when the table was already renamed on parsing.
        """
        values = {}
        for field_name, field_type in descriptor.fields.items():
            column = descriptor.column_for(field_name)
            if column not in names:
                column = field_name
            raw = row[names.index(column)] if column in names else ""
            values[field_name] = self.codec.decode(raw, field_type)
        return descriptor.build(values)

    def unbind(self, objects: Iterable[Any], name: str) -> TypelessData:
        """Turn instances back into a typeless table for writing."""
        descriptor = self.descriptors.get(name)
        if descriptor is None:
            raise NoObjectDataError(name)
        rows = []
        for obj in objects:
            values = descriptor.extract(obj)
            rows.append([
                self.codec.decode_text(self.codec.encode(value, descriptor.fields[field_name]))
                for field_name, value in values.items()
            ])
        return TypelessData(name, descriptor.column_names, rows)

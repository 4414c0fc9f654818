"""
Prefix-driven line classification.

Every line kind of a document (configuration, conversion, property, value and
metadata lines) is found the same way: by the first field and, optionally, by
the schema name in the second field.
"""

from typing import Callable, Iterable, List, Optional, Union

from .tokenizer import split_line

Prefixes = Union[str, Iterable[str]]


def _as_set(prefixes: Prefixes) -> set:
    if isinstance(prefixes, str):
        return {prefixes}
    return set(prefixes)


def get_items(lines: Iterable[str], prefixes: Prefixes, schema: Optional[str] = None) -> List[List[str]]:
    """
    Get the tokenized lines that start with one of ``prefixes``.

    :param lines: Document lines
    :param prefixes: A prefix or a collection of accepted prefixes
    :param schema: When given, the second field must equal it
    :return: The full field lists, prefix and schema columns included
    """
    wanted = _as_set(prefixes)
    items = []
    for line in lines:
        fields = split_line(line)
        if fields[0] not in wanted:
            continue
        if schema is not None and (len(fields) < 2 or fields[1] != schema):
            continue
        items.append(fields)
    return items


def get_names(lines: Iterable[str], prefixes: Prefixes, schema: str) -> Optional[List[str]]:
    """Get the property names of the first matching line, or None when there is none."""
    items = get_items(lines, prefixes, schema)
    if not items:
        return None
    return items[0][2:]


def get_values(lines: Iterable[str], prefixes: Prefixes, schema: str) -> List[List[str]]:
    """Get the fields after the prefix and schema columns of every matching line."""
    return [fields[2:] for fields in get_items(lines, prefixes, schema)]


def get_schema_names(lines: Iterable[str], prefixes: Prefixes,
                     prefix_for: Callable[[str], str]) -> List[str]:
    """
    Get the distinct schema names in document order.

    A line only counts when its prefix is the one ``prefix_for`` resolves for
    the schema named on that line, so a schema that overrides its own prefix
    is not picked up under the global one.
    """
    names: List[str] = []
    for fields in get_items(lines, prefixes):
        if len(fields) < 2:
            continue
        schema = fields[1]
        if schema in names:
            continue
        if fields[0] == prefix_for(schema):
            names.append(schema)
    return names

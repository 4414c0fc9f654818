"""
Line tokenizer for the record format.

A document is reduced to its meaningful lines first, then each line is split
on commas. Fields that were wrongly split inside a double-quoted value are
joined back together before any trimming happens, so spaces next to a comma
inside quotes survive.
"""

import re
from typing import Iterable, List

from .defaults import DEFAULT_COMMENT_PREFIXES

_LINE_BREAK = re.compile(r"[\r\n]+")


def split_lines(text: str, comment_prefixes: Iterable[str] = DEFAULT_COMMENT_PREFIXES) -> List[str]:
    """
    Split text into the lines of a document.

    Lines are trimmed; blank lines and lines starting with any of
    ``comment_prefixes`` are dropped.

    :param text: The raw document text
    :param comment_prefixes: Prefixes marking a comment line
    :return: The remaining lines in document order
    """
    prefixes = tuple(p for p in comment_prefixes if p)
    lines = []
    for line in _LINE_BREAK.split(text):
        line = line.strip()
        if not line:
            continue
        if prefixes and line.startswith(prefixes):
            continue
        lines.append(line)
    return lines


def rejoin_split_quotes(fields: List[str]) -> List[str]:
    """
    Rejoin fields that were split on a comma inside a quoted value.

    While a field (trimmed) starts with ``"`` but does not end with one, the
    next field is appended with the comma restored. Fields are returned
    untrimmed.
    """
    result: List[str] = []
    index = 0
    while index < len(fields):
        current = fields[index]
        index += 1
        while _is_open_quote(current) and index < len(fields):
            current = f"{current},{fields[index]}"
            index += 1
        result.append(current)
    return result


def _is_open_quote(value: str) -> bool:
    stripped = value.strip()
    if not stripped.startswith('"'):
        return False
    # A lone quote both starts and ends with '"' but is still unbalanced
    return len(stripped) == 1 or not stripped.endswith('"')


def split_line(line: str) -> List[str]:
    """
    Split one line into trimmed fields.

    >>> split_line('Values,Foo,1,"Name, with a comma"')
    ['Values', 'Foo', '1', '"Name, with a comma"']
    """
    return [part.strip() for part in rejoin_split_quotes(line.split(","))]

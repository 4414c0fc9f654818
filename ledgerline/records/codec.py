"""
Scalar coercion between document fields and Python values.

Strings are written double-quoted, booleans as ``True``/``False``, enum
members as ``TypeName.Member`` and numbers plainly. Reading reverses this and
hands out sequence numbers for the ``#`` placeholder.
"""

import typing
from enum import Enum
from typing import Any, Optional, Tuple

from .defaults import PLACEHOLDER, DataValue
from .sequence import SequenceTracker

_NONE_TYPE = type(None)


def unwrap_optional(target_type: Any) -> Tuple[Any, bool]:
    """Return ``(inner_type, is_optional)`` for ``Optional[X]``, else ``(target_type, False)``."""
    if typing.get_origin(target_type) is typing.Union:
        args = [arg for arg in typing.get_args(target_type) if arg is not _NONE_TYPE]
        if len(args) == 1:
            return args[0], True
    return target_type, False


class ScalarCodec:
    """Decode and encode single scalar fields."""

    @staticmethod
    def decode_text(raw: str) -> str:
        """Trim, drop surrounding quotes, trim again."""
        return raw.strip().strip('"').strip()

    @staticmethod
    def is_placeholder(raw: str) -> bool:
        return raw.strip() == PLACEHOLDER

    def decode(
        self,
        raw: str,
        target_type: Any = str,
        sequence_key: Optional[str] = None,
        tracker: Optional[SequenceTracker] = None,
    ) -> Any:
        """
        Decode one raw field to ``target_type``.

        :param raw: The field as it appears in the document
        :param target_type: ``str``, ``int``, ``float``, ``bool``, an Enum
            subclass or ``Optional`` of one of these
        :param sequence_key: Counter used when a numeric field is the placeholder
        :param tracker: Run-scoped sequence tracker
        :return: The decoded value; None for empty optional fields and for
            numbers that cannot be parsed
        """
        inner, optional = unwrap_optional(target_type)

        # Only numeric fields draw from the counter; text keeps a literal "#"
        if inner in (int, float) and tracker is not None and sequence_key is not None and self.is_placeholder(raw):
            number = tracker.next(sequence_key)
            return number if inner is int else float(number)

        text = self.decode_text(raw)
        if inner is str or inner is Any:
            if optional and not text:
                return None
            return text
        if not text:
            return None if optional or inner in (int, float) else self._empty(inner)
        if inner is bool:
            return self._decode_bool(text)
        if inner is int:
            try:
                return int(text)
            except ValueError:
                return None
        if inner is float:
            try:
                return float(text)
            except ValueError:
                return None
        if isinstance(inner, type) and issubclass(inner, Enum):
            return self._decode_enum(text, inner)
        return inner(text)

    @staticmethod
    def _empty(inner: Any) -> Any:
        if inner is bool:
            return False
        if isinstance(inner, type) and issubclass(inner, Enum):
            return next(iter(inner))
        return None

    @staticmethod
    def _decode_bool(text: str) -> Optional[bool]:
        lowered = text.lower()
        if lowered == DataValue.TRUE.value.lower():
            return True
        if lowered == DataValue.FALSE.value.lower():
            return False
        return None

    @staticmethod
    def _decode_enum(text: str, enum_type: typing.Type[Enum]) -> Enum:
        member = text.rsplit(".", 1)[-1]
        if member in enum_type.__members__:
            return enum_type[member]
        return next(iter(enum_type))

    def encode(self, value: Any, value_type: Any = None) -> str:
        """
        Render a value as a document field.

        :param value: The value to render
        :param value_type: Declared type; used for ``None`` strings, which render as ``""``
        """
        if value is None:
            inner, _ = unwrap_optional(value_type)
            return '""' if inner is str else ""
        if isinstance(value, bool):
            return (DataValue.TRUE if value else DataValue.FALSE).value
        if isinstance(value, Enum):
            return f"{type(value).__name__}.{value.name}"
        if isinstance(value, (int, float)):
            return str(value)
        return f'"{value}"'

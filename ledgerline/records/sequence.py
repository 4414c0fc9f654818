from typing import Dict


class SequenceTracker:
    """Run-scoped counters handing out values for the ``#`` placeholder."""

    def __init__(self):
        self._counters: Dict[str, int] = {}

    def initialize(self, *names: str) -> None:
        """Start a counter at 1 for each name that has none yet."""
        for name in names:
            self._counters.setdefault(name, 1)

    def next(self, name: str) -> int:
        """
        Return the current value for ``name`` and advance its counter.

        :param name: Schema name or metadata prefix
        :return: The assigned sequence value
        """
        self.initialize(name)
        value = self._counters[name]
        self._counters[name] = value + 1
        return value

    def clear(self) -> None:
        self._counters.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._counters

    def __repr__(self):
        return f"SequenceTracker({self._counters})"

"""
Common interfaces for ledgerline parsers, writers and exporters.

This module defines the abstract base classes every backend implements, so
that the handler and the command line tool can swap them freely.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, IO, Optional, Union

from .models import ParseResult
from .options import Options


class BaseParser(ABC):
    """
    Abstract base class for record parsers.

    Parsers hold read-only options only; every parse call builds its own
    run-scoped state.
    """

    def __init__(self, options: Optional[Options] = None):
        """
        Initialize the parser.

        :param options: Prefixes, conversion switches and declarations
        :raises ConfigurationConflictError: If the options contradict each other
        """
        self.options = options or Options()
        self.options.validate()

    @abstractmethod
    def parse(self, text: str) -> ParseResult:
        """
        Parse a document and return its typeless representation.

        :param text: The full document text
        :type text: str
        :return: Parsed schemas and metadata
        :rtype: ParseResult
        """
        pass


class BaseWriter(ABC):
    """Abstract base class for record writers."""

    @abstractmethod
    def write(self, file_obj: IO, data: Any = None) -> None:
        """
        Write records to a file object.

        :param file_obj: The file object to write to
        :type file_obj: IO
        :param data: The records to write, if the writer does not hold them already
        :return: None
        """
        pass


class BaseExporter(ABC):
    """Abstract base class for all ledgerline exporters."""

    def __init__(self, quiet: bool = False):
        """
        Initialize the exporter.

        Args:
            quiet: Suppress progress messages
        """
        self.quiet = quiet

    @abstractmethod
    def export_data(
        self,
        result: ParseResult,
        file_path: Optional[Union[str, Path]] = None,
        **kwargs
    ) -> Any:
        """
        Export parsed records to the target format.

        Args:
            result: The parse result to export
            file_path: Path to save the output (optional)
            **kwargs: Additional format-specific options

        Returns:
            The exported representation if no file_path is given, otherwise None
        """
        pass

from pathlib import Path
from typing import Any, Dict, IO, List, Optional, Union
from .parser import RecordParser
from .writer import DocumentWriter
from .exporter import JSONExporter, DataFrameExporter
from .models import MetadataRecord, ParseResult, TypelessData
from .defaults import ExportFormat
from .options import Options


class RecordHandler:
    """A class to handle reading, writing and exporting record documents."""

    def __init__(self, options: Optional[Options] = None, quiet: bool = False):
        """
        Initialize the handler.

        :param options: Options shared by parsing and writing
        :param quiet: Suppress exporter progress messages
        """
        self.options = options or Options()
        self.quiet = quiet
        self._parser = RecordParser(self.options)

    @property
    def parser(self) -> RecordParser:
        return self._parser

    def read(self, filename: Union[str, Path]) -> ParseResult:
        """
        Read and parse a document file.

        :param filename: The name of the file to parse.
        :type filename: Union[str, Path]
        :return: The parsed schemas and metadata.
        :rtype: ParseResult
        """
        with open(filename, "r", encoding="utf-8", newline="") as f:
            return self.parse(f.read())

    def parse(self, text: str) -> ParseResult:
        """
        Parse document text.

        :param text: The document text.
        :type text: str
        :return: The parsed schemas and metadata.
        :rtype: ParseResult
        """
        return self._parser.parse(text)

    def write(
        self,
        target: Union[str, Path, IO],
        data: Union[ParseResult, Dict[str, TypelessData]],
        metadata: Optional[Dict[str, List[MetadataRecord]]] = None,
    ) -> None:
        """
        Write records to a path or an open file object.

        :param target: File path or file object to write to
        :param data: A parse result, or TypelessData tables by schema name
        :param metadata: Metadata records by schema name, overriding those of a parse result
        :return: None
        """
        writer = DocumentWriter(self.options)
        writer.write_document(data, metadata)
        if isinstance(target, (str, Path)):
            # newline="" keeps the CRLF separators exactly as serialized
            with open(target, "w", encoding="utf-8", newline="") as f:
                writer.write(f)
        else:
            writer.write(target)

    def export(
        self,
        result: ParseResult,
        format_type: Union[str, ExportFormat] = ExportFormat.JSON,
        file_path: Optional[Union[str, Path]] = None,
        **kwargs
    ) -> Any:
        """
        Export parsed records to various formats.

        :param result: The parse result to export
        :type result: ParseResult
        :param format_type: Export format ('json' or 'dataframe')
        :type format_type: Union[str, ExportFormat]
        :param file_path: Path to save the output (optional)
        :type file_path: Optional[Union[str, Path]]
        :param kwargs: Additional format-specific options
        :return: The exported representation if no file_path provided, otherwise None
        """
        # Convert string inputs to enums
        if isinstance(format_type, str):
            format_type = ExportFormat(format_type.lower())

        if format_type == ExportFormat.JSON:
            return self._export_json(result, file_path, **kwargs)
        elif format_type == ExportFormat.DATAFRAME:
            return self._export_dataframe(result, file_path, **kwargs)
        else:
            raise ValueError(f"Unsupported export format: {format_type}")

    # Private methods for specific format handling
    def _export_json(self, result: ParseResult, file_path: Optional[Union[str, Path]], **kwargs) -> Optional[str]:
        """Export to JSON format."""
        exporter = JSONExporter(quiet=self.quiet)
        indent = kwargs.get('indent', 2)
        return exporter.export_data(result, file_path, indent=indent)

    def _export_dataframe(self, result: ParseResult, file_path: Optional[Union[str, Path]], **kwargs) -> Any:
        """Export to pandas DataFrames."""
        exporter = DataFrameExporter(quiet=self.quiet)
        return exporter.export_data(result, file_path)

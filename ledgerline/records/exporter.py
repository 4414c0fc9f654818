#!/usr/bin/env python3
"""
Exporters for parsed records.

JSONExporter writes each schema's names, rows and metadata as JSON;
DataFrameExporter turns each schema into a pandas DataFrame.
"""

import dataclasses
import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd

from .common import BaseExporter
from .models import MetadataRecord, ParseResult


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {k: _plain(v) for k, v in dataclasses.asdict(value).items()}
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if hasattr(value, "__dict__") and not isinstance(value, type):
        return {k: _plain(v) for k, v in vars(value).items() if not k.startswith("_")}
    return value


def metadata_to_dict(record: MetadataRecord) -> Dict[str, Any]:
    return {
        "prefix": record.prefix,
        "kind": record.kind.value,
        "scope": record.scope.value,
        "value": _plain(record.value),
    }


class JSONExporter(BaseExporter):
    """Export parsed records to JSON."""

    def to_dict(self, result: ParseResult) -> Dict[str, Any]:
        """Convert a parse result to ``{schema: {names, rows, metadata}}``."""
        return {
            name: {
                "names": list(table.names),
                "rows": [list(row) for row in table.rows],
                "metadata": [metadata_to_dict(r) for r in result.metadata_for(name)],
            }
            for name, table in result.data.items()
        }

    def export_data(
        self,
        result: ParseResult,
        file_path: Optional[Union[str, Path]] = None,
        indent: int = 2,
        **kwargs
    ) -> Optional[str]:
        """
        Export parsed records to JSON format.

        Args:
            result: The parse result to export
            file_path: Path to save the file (optional)
            indent: Number of spaces for indentation

        Returns:
            JSON string if no file_path provided, otherwise None
        """
        json_str = json.dumps(self.to_dict(result), indent=indent, ensure_ascii=False)
        if file_path:
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(json_str)
            if not self.quiet:
                print(f"Exported JSON to: {file_path}")
            return None
        return json_str


class DataFrameExporter(BaseExporter):
    """Export each schema to a pandas DataFrame."""

    def export_data(
        self,
        result: ParseResult,
        file_path: Optional[Union[str, Path]] = None,
        **kwargs
    ) -> Optional[Dict[str, pd.DataFrame]]:
        """
        Export parsed records to DataFrames.

        Args:
            result: The parse result to export
            file_path: Directory to write one CSV file per schema (optional)

        Returns:
            Dictionary mapping schema names to DataFrames if no file_path
            provided, otherwise None
        """
        frames = {
            name: pd.DataFrame(table.rows, columns=table.names, dtype=str)
            for name, table in result.data.items()
        }
        if file_path is None:
            return frames

        output_dir = Path(file_path)
        output_dir.mkdir(parents=True, exist_ok=True)
        for name, frame in frames.items():
            frame.to_csv(output_dir / f"{name}.csv", index=False)
        if not self.quiet:
            print(f"Exported {len(frames)} schema(s) to: {output_dir}")
        return None

"""CLI output formatting utilities.

Supports text, JSON, YAML and table output for planner commands.
"""
from __future__ import annotations

import datetime as _dt
import json
import sys
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any, List, Optional, TextIO


class OutputFormat(str, Enum):
    """Output format options."""
    TEXT = "text"
    JSON = "json"
    YAML = "yaml"
    TABLE = "table"


@dataclass
class OutputConfig:
    """Configuration for output formatting."""
    format: OutputFormat = OutputFormat.TEXT
    verbose: bool = False
    quiet: bool = False
    file: Optional[TextIO] = None

    @property
    def stream(self) -> TextIO:
        return self.file or sys.stdout


class OutputWriter:
    """Handles formatted output for CLI commands."""

    def __init__(self, config: Optional[OutputConfig] = None):
        self.config = config or OutputConfig()

    def print(self, *args, **kwargs) -> None:
        if self.config.quiet:
            return
        kwargs.setdefault("file", self.config.stream)
        print(*args, **kwargs)

    def print_warning(self, message: str) -> None:
        print(f"Warning: {message}", file=sys.stderr)

    def print_verbose(self, message: str) -> None:
        if self.config.verbose:
            self.print(message)

    def print_data(self, data: Any, headers: Optional[List[str]] = None) -> None:
        """Print data in the configured format.

        Args:
            data: dict, list of dicts/rows, dataclass, or plain string.
            headers: Optional column headers for table format.
        """
        fmt = self.config.format
        if fmt == OutputFormat.JSON:
            self.print(json.dumps(normalize_for_output(data), indent=2))
        elif fmt == OutputFormat.YAML:
            import yaml

            self.print(
                yaml.safe_dump(normalize_for_output(data), default_flow_style=False, sort_keys=False),
                end="",
            )
        elif fmt == OutputFormat.TABLE:
            self._print_table(normalize_for_output(data), headers)
        else:
            self._print_text(data)

    def _print_table(self, data: Any, headers: Optional[List[str]] = None) -> None:
        rows = data if isinstance(data, list) else [data]
        if not rows:
            return
        if headers is None and isinstance(rows[0], dict):
            headers = list(rows[0].keys())
        if not headers:
            for row in rows:
                self.print(" | ".join(str(v) for v in row) if isinstance(row, (list, tuple)) else str(row))
            return

        str_rows = [
            [_cell(row.get(h, "")) for h in headers] if isinstance(row, dict) else [_cell(v) for v in row]
            for row in rows
        ]
        widths = [len(h) for h in headers]
        for str_row in str_rows:
            for i, val in enumerate(str_row[: len(widths)]):
                widths[i] = max(widths[i], len(val))

        header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
        self.print(header_line)
        self.print("-" * len(header_line))
        for str_row in str_rows:
            self.print(" | ".join(v.ljust(widths[i]) if i < len(widths) else v for i, v in enumerate(str_row)))

    def _print_text(self, data: Any) -> None:
        if isinstance(data, str):
            self.print(data)
        elif isinstance(data, dict):
            for key, value in data.items():
                self.print(f"{key}: {value}")
        elif isinstance(data, (list, tuple)):
            for item in data:
                self.print(item)
        elif is_dataclass(data) and not isinstance(data, type):
            self._print_text(asdict(data))
        else:
            self.print(str(data))


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else ""
    return str(value)


def normalize_for_output(data: Any) -> Any:
    """Reduce dataclasses, enums, dates and sets to JSON/YAML-safe values."""
    if is_dataclass(data) and not isinstance(data, type):
        return normalize_for_output(asdict(data))
    if isinstance(data, dict):
        return {str(k): normalize_for_output(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [normalize_for_output(v) for v in data]
    if isinstance(data, (set, frozenset)):
        return sorted(normalize_for_output(v) for v in data)
    if isinstance(data, Enum):
        return data.value
    if isinstance(data, (_dt.date, _dt.time)):
        return data.isoformat()
    return data

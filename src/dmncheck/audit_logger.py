"""
Audit Logger module for dmncheck.

Structured logging with a level threshold. Every entry is rendered as a
JSON object, a human-readable text line, or both. Output goes to stderr by
default so it never mixes with availability results on stdout.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, TextIO

from dmncheck.enums import LogLevel

OUTPUT_FORMATS = ("json", "text", "both")


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class LogEntry:
    """One emitted log record."""

    timestamp: str
    level: LogLevel
    component: str
    message: str
    data: dict = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(
            {
                "timestamp": self.timestamp,
                "level": self.level.value,
                "component": self.component,
                "message": self.message,
                "data": self.data,
            },
            ensure_ascii=False,
        )

    def to_text(self) -> str:
        """Render as ``[timestamp] LEVEL [component] message {data}``."""
        line = f"[{self.timestamp}] {self.level.value.upper()} [{self.component}] {self.message}"
        if self.data:
            line += " " + json.dumps(self.data, ensure_ascii=False)
        return line


class AuditLogger:
    """
    Structured logger with JSON and text output.

    Entries below ``level`` are dropped. Entries at or above it are written
    to the output stream and kept in memory for inspection.

    Args:
        output_format: 'json', 'text', or 'both'
        output_stream: Destination stream (defaults to sys.stderr)
        level: Minimum level that is emitted
    """

    def __init__(
        self,
        output_format: str = "text",
        output_stream: Optional[TextIO] = None,
        level: LogLevel = LogLevel.INFO,
    ) -> None:
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output_format: {output_format}")

        self._format = output_format
        self._stream = output_stream or sys.stderr
        self._level = level
        self._entries: list[LogEntry] = []

    @classmethod
    def from_config(cls, logging_config, output_stream: Optional[TextIO] = None) -> "AuditLogger":
        """Build a logger from a LoggingConfig."""
        return cls(
            output_format=logging_config.output_format,
            output_stream=output_stream,
            level=LogLevel(logging_config.level.lower()),
        )

    @property
    def output_format(self) -> str:
        return self._format

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def entries(self) -> list[LogEntry]:
        """Emitted entries, oldest first."""
        return list(self._entries)

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level.severity >= self._level.severity

    def log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Record and write an entry.

        Returns:
            The emitted LogEntry, or None if ``level`` is below the threshold
        """
        if not self.is_enabled_for(level):
            return None

        entry = LogEntry(
            timestamp=_utc_timestamp(),
            level=level,
            component=component,
            message=message,
            data=dict(data or {}),
        )
        self._entries.append(entry)
        self._write(entry)
        return entry

    def log_error(
        self,
        component: str,
        message: str,
        error: Optional[Exception] = None,
        request_url: Optional[str] = None,
        additional_data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Log at ERROR level with the failing exception and request attached.

        A ``code`` attribute on the exception (as on DmncheckError) is
        recorded as ``error_code``.
        """
        context = dict(additional_data or {})

        if error is not None:
            context.update(
                error_type=type(error).__name__,
                error_message=str(error),
            )
            error_code = getattr(error, "code", None)
            if error_code is not None:
                context["error_code"] = error_code

        if request_url is not None:
            context["request_url"] = request_url

        return self.log(LogLevel.ERROR, component, message, context)

    def _write(self, entry: LogEntry) -> None:
        lines = []
        if self._format != "text":
            lines.append(entry.to_json())
        if self._format != "json":
            lines.append(entry.to_text())
        self._stream.write("".join(line + "\n" for line in lines))
        self._stream.flush()

    def clear_entries(self) -> None:
        self._entries.clear()

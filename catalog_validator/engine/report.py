# Path: catalog_validator/engine/report.py
"""
Report

Plain-text rendering of aggregated error records, one line per record:

    at Public ID -//X//EN, file:/docs/a.xml, line 12, column 7: ERROR: message

Location parts are listed only when known; records without any location
are rendered without the 'at' prefix.
"""

from typing import Iterable, Optional

from catalog_validator.engine.error_aggregator import ErrorAggregator, ErrorRecord, SourceLocator


def format_locator(locator: SourceLocator) -> str:
    """Comma-separated location parts that are known, '' if none are."""
    parts = []
    if locator.public_id:
        parts.append(f"Public ID {locator.public_id}")
    if locator.system_id:
        parts.append(locator.system_id)
    if locator.line >= 0:
        parts.append(f"line {locator.line}")
    if locator.column >= 0:
        parts.append(f"column {locator.column}")
    return ', '.join(parts)


def format_record(record: ErrorRecord) -> str:
    location = format_locator(record.locator)
    line = f"{record.severity.value.upper()}: {record.message}"
    return f"at {location}: {line}" if location else line


class ErrorsSerializer:
    """Formats the records of an ErrorAggregator into the run report."""

    @staticmethod
    def serialize(handler: ErrorAggregator) -> Optional[str]:
        """
        Report text for all records of the handler.

        Returns:
            One line per record, or None if nothing was recorded
        """
        return ErrorsSerializer.serialize_records(handler.get_errors())

    @staticmethod
    def serialize_records(records: Iterable[ErrorRecord]) -> Optional[str]:
        lines = [format_record(record) for record in records]
        if not lines:
            return None
        return '\n'.join(lines)


__all__ = ['format_locator', 'format_record', 'ErrorsSerializer']

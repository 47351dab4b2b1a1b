"""Record formatters for the daily event log file."""

import json
from xml.etree import ElementTree as ET

from .models import LogFormat, LogRecord


class LogFormatter:
    """Formats single records and describes the file container around them."""

    extension = ""
    header = ""
    footer = ""
    separator = ""
    indent = 2

    def format(self, record: LogRecord) -> str:
        """Format one record (not the whole file)."""
        raise NotImplementedError


class JsonLogFormatter(LogFormatter):
    """One indented JSON object per record, inside a JSON array."""

    extension = "json"
    header = "["
    footer = "]"
    separator = ","

    def format(self, record: LogRecord) -> str:
        return json.dumps(record.model_dump(mode="json"), indent=2, ensure_ascii=False)


class XmlLogFormatter(LogFormatter):
    """One ``<LogEntry>`` element per record, inside a ``<Logs>`` document."""

    extension = "xml"
    header = '<?xml version="1.0" encoding="utf-8"?>\n<Logs>'
    footer = "</Logs>"

    def format(self, record: LogRecord) -> str:
        entry = ET.Element("LogEntry")
        ET.SubElement(entry, "Timestamp").text = record.timestamp.isoformat()
        ET.SubElement(entry, "JobName").text = record.job_name
        ET.SubElement(entry, "EventType").text = record.event.value
        ET.SubElement(entry, "SourcePath").text = record.source_path
        ET.SubElement(entry, "DestinationPath").text = record.destination_path
        ET.SubElement(entry, "FileSizeBytes").text = str(record.file_size_bytes)
        ET.SubElement(entry, "TransferTimeMs").text = str(record.transfer_time_ms)

        ET.indent(entry, space="  ")
        return ET.tostring(entry, encoding="unicode")


_FORMATTERS = {
    LogFormat.JSON: JsonLogFormatter,
    LogFormat.XML: XmlLogFormatter,
}


def get_formatter(log_format: LogFormat) -> LogFormatter:
    """Return a formatter instance for ``log_format``."""
    try:
        return _FORMATTERS[LogFormat(log_format)]()
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unsupported log format: {log_format!r}") from e

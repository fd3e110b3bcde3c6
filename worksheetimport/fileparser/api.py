from __future__ import annotations

from .fileparser import FileParser, ParserError
from .model import FileFormat, ParsedFile


def parse(file_path: str, file_format: FileFormat) -> ParsedFile:
    """Public API (FileParser)

    Contract:
    - Read the file, split lines on "\\n" and fields on the format delimiter.
    - Trailing carriage returns are stripped from the first field of every row.
    - No value conversion.
    - Unreadable file or missing header row -> ParserError.
    """
    return FileParser().parse(file_path, file_format)


def parse_text(text: str, file_format: FileFormat) -> ParsedFile:
    """Public API (FileParser) for content that is already in memory."""
    return FileParser().parse_text(text, file_format)


def detect_format(file_name: str) -> FileFormat:
    """Public API (FileParser)

    Contract:
    - ".txt" -> format A (tab), ".csv" -> format B (comma); case-insensitive.
    - Anything else -> ParserError.
    """
    return FileParser().detect_format(file_name)


def batch_id_from_filename(file_name: str) -> str:
    """Public API (FileParser)

    Contract:
    - Batch id is the lower-cased file name without directory and extension.
    """
    return FileParser().batch_id_from_filename(file_name)

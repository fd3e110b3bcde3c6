from __future__ import annotations

from pathlib import Path
from typing import List

from .model import FORMATS, FileFormat, ParsedFile


FALLBACK_ENCODING: str = "latin-1"


class ParserError(RuntimeError):
    pass


class FileParser:
    def parse(self, file_path: str, file_format: FileFormat) -> ParsedFile:
        try:
            text = self._read_text(Path(file_path))
        except Exception as e:
            raise ParserError(f"Cannot read {file_path}: {e}") from e
        return self.parse_text(text, file_format, source_path=file_path)

    def parse_text(self, text: str, file_format: FileFormat, source_path: str = "") -> ParsedFile:
        rows = [self._split_line(line, file_format.delimiter) for line in text.split("\n")]
        if len(rows) <= file_format.header_row:
            raise ParserError(
                f"header row {file_format.header_row} not found in {source_path or 'input'} ({len(rows)} rows)"
            )
        meta = {"row_count": len(rows), "format": file_format.name}
        return ParsedFile(source_path=source_path, file_format=file_format, rows=rows, meta=meta)

    def detect_format(self, file_name: str) -> FileFormat:
        suffix = Path(file_name).suffix.lower()
        if suffix not in FORMATS:
            raise ParserError(f"Unsupported file type: {file_name}")
        return FORMATS[suffix]

    def batch_id_from_filename(self, file_name: str) -> str:
        name = Path(file_name).name.lower()
        suffix = Path(name).suffix
        return name[: -len(suffix)] if suffix else name

    def _read_text(self, path: Path) -> str:
        raw = path.read_bytes()
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            return raw.decode(FALLBACK_ENCODING)

    def _split_line(self, line: str, delimiter: str) -> List[str]:
        fields = line.split(delimiter)
        fields[0] = fields[0].rstrip("\r")
        return fields

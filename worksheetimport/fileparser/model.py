from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class FileFormat:
    name: str
    extension: str
    delimiter: str
    header_row: int
    identity_field: int
    spike_qualifier: Optional[str] = None


@dataclass(frozen=True)
class ParsedFile:
    source_path: str
    file_format: FileFormat
    rows: List[List[str]]
    meta: Dict[str, object]

    @property
    def header(self) -> List[str]:
        return self.rows[self.file_format.header_row]

    @property
    def data_rows(self) -> List[List[str]]:
        return self.rows[self.file_format.header_row + 1:]


# Tab-separated export, header on the first line, sample name in column 2.
FORMAT_A = FileFormat(name="A", extension=".txt", delimiter="\t", header_row=0, identity_field=1)

# Comma-separated export with a three line preamble; spiked replicates end in "-spk".
FORMAT_B = FileFormat(
    name="B", extension=".csv", delimiter=",", header_row=3, identity_field=0, spike_qualifier="-spk"
)

FORMATS: Dict[str, FileFormat] = {f.extension: f for f in (FORMAT_A, FORMAT_B)}

from __future__ import annotations

from typing import Dict

from .accumulator import ReadingAccumulator, to_float
from .model import WorksheetDocument


def new_accumulator(column_map: Dict[int, str]) -> ReadingAccumulator:
    """Public API (ReadingAccumulator)

    Contract:
    - Cell values -> float rounded to 5 significant figures; empty,
      non-numeric or non-finite -> 0.0.
    - NORMAL rows -> readings[(analyte, test_id)].
    - QC rows -> control_data[key]["<analyte>_raw"] plus qc_type
      (and sample_id/test_id for flagged samples).
    - Every accepted row appends its key to testing_file_order; no dedupe.
    """
    return ReadingAccumulator(column_map)


def parse_value(value: object) -> float:
    """Public API (ReadingAccumulator): single cell conversion."""
    return to_float(value)

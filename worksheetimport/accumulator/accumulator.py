from __future__ import annotations

import math
from typing import Any, Dict, List

from worksheetimport.qcclassifier.model import RowClassification, RowKind
from .model import WorksheetDocument


SIG_FIGS: int = 5
DEFAULT_VALUE: float = 0.0
RAW_SUFFIX: str = "_raw"


class AccumulatorError(RuntimeError):
    pass


def to_float(value: Any, default: float = DEFAULT_VALUE, sig_figs: int = SIG_FIGS) -> float:
    if isinstance(value, str):
        value = value.strip()
        if not value or "_" in value:
            return default
        try:
            parsed = float(value)
        except ValueError:
            return default
    else:
        try:
            parsed = float(value)
        except (TypeError, ValueError):
            return default

    if not math.isfinite(parsed):
        return default
    return float(f"{parsed:.{sig_figs}g}")


class ReadingAccumulator:
    def __init__(self, column_map: Dict[int, str]) -> None:
        self.column_map = dict(column_map)
        self.document = WorksheetDocument()

    def add_row(self, classification: RowClassification, row: List[str]) -> None:
        if classification.kind is RowKind.SKIPPED:
            raise AccumulatorError("skipped rows carry no readings")

        doc = self.document
        doc.testing_file_order.append(classification.key)

        if classification.kind is RowKind.NORMAL:
            for position, analyte in sorted(self.column_map.items()):
                doc.readings[(analyte, classification.test_id)] = to_float(self._cell(row, position))
            return

        entry: Dict[str, Any] = {"qc_type": classification.qc_type}
        if classification.kind is RowKind.FLAGGED_QC:
            entry["sample_id"] = classification.sample_id
            entry["test_id"] = classification.test_id
        for position, analyte in sorted(self.column_map.items()):
            entry[f"{analyte}{RAW_SUFFIX}"] = to_float(self._cell(row, position))
        doc.control_data[str(classification.key)] = entry

    def _cell(self, row: List[str], position: int) -> str:
        return row[position] if position < len(row) else ""

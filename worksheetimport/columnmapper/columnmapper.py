from __future__ import annotations

from typing import Dict, List


class ColumnMapper:
    def map_columns(self, header: List[str], labels_to_analytes: Dict[str, str]) -> Dict[int, str]:
        mapping: Dict[int, str] = {}
        for position, cell in enumerate(header):
            analyte = labels_to_analytes.get(str(cell).strip())
            # ID, date and other bookkeeping columns have no analyte
            if analyte:
                mapping[position] = analyte
        return mapping

from __future__ import annotations

from typing import Dict, List

from .columnmapper import ColumnMapper


def map_columns(header: List[str], labels_to_analytes: Dict[str, str]) -> Dict[int, str]:
    """Public API (ColumnMapper)

    Contract:
    - Header cells are trimmed and looked up as exact (case-sensitive) labels.
    - Result: column position -> analyte code.
    - Unknown labels are ignored.
    """
    return ColumnMapper().map_columns(header, labels_to_analytes)

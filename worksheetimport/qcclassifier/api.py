from __future__ import annotations

from typing import List

from .model import RowClassification, RowKind
from .qcclassifier import QcClassifier


def new_classifier(qc_types: List[str]) -> QcClassifier:
    """Public API (QCClassifier)

    Contract:
    - Known test id + non-QC sample -> NORMAL, key = test id.
    - Known test id + QC sample -> FLAGGED_QC, key "matrix_spike_<id>" / "matrix_blank_<id>".
    - Otherwise first qc_types entry contained in the token (case-insensitive)
      -> NAMED_QC, key "<type>_<n>" with one counter per type.
    - Otherwise SKIPPED.
    - One classifier per file; counters are not shared between files.
    """
    return QcClassifier(qc_types)

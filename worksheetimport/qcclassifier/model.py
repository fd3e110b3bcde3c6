from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


MATRIX_SPIKE: str = "matrix_spike"
MATRIX_BLANK: str = "matrix_blank"


class RowKind(str, Enum):
    NORMAL = "normal"
    FLAGGED_QC = "flagged_qc"
    NAMED_QC = "named_qc"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class RowClassification:
    kind: RowKind
    key: Union[int, str, None]
    qc_type: Optional[str] = None
    test_id: Optional[int] = None
    sample_id: Optional[int] = None

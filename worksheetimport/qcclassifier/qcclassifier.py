from __future__ import annotations

from typing import Dict, List, Optional

from worksheetimport.identityresolver.identityresolver import SampleQcCache
from worksheetimport.identityresolver.model import RowIdentity, TestIndex
from .model import MATRIX_BLANK, MATRIX_SPIKE, RowClassification, RowKind


class QcClassifier:
    """Classifies the data rows of one file.

    Named QC counters live on the instance, so use one classifier per file.
    """

    def __init__(self, qc_types: List[str]) -> None:
        self.qc_types = list(qc_types)
        self.counters: Dict[str, int] = {t: 0 for t in self.qc_types}

    def classify(self, identity: RowIdentity, index: TestIndex, qc_flags: SampleQcCache) -> RowClassification:
        test_id = identity.candidate_test_id
        if test_id is not None and test_id in index.test_ids:
            sample_id = index.sample_of(test_id)
            if sample_id is None or not qc_flags.is_qc(sample_id):
                return RowClassification(kind=RowKind.NORMAL, key=test_id, test_id=test_id, sample_id=sample_id)

            qc_type = MATRIX_SPIKE if identity.is_spike else MATRIX_BLANK
            return RowClassification(
                kind=RowKind.FLAGGED_QC,
                key=f"{qc_type}_{test_id}",
                qc_type=qc_type,
                test_id=test_id,
                sample_id=sample_id,
            )

        qc_type = self.match_qc_type(identity.token)
        if qc_type is None:
            return RowClassification(kind=RowKind.SKIPPED, key=None)

        self.counters[qc_type] += 1
        return RowClassification(kind=RowKind.NAMED_QC, key=f"{qc_type}_{self.counters[qc_type]}", qc_type=qc_type)

    def match_qc_type(self, token: str) -> Optional[str]:
        # declaration order decides between overlapping names
        lowered = token.lower()
        for qc_type in self.qc_types:
            if qc_type.lower() in lowered:
                return qc_type
        return None

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TestWriteResult:
    __test__ = False

    sample_id: int
    test_id: int
    status: str  # updated|skipped_qc|no_data|failed
    error: Optional[str] = None


@dataclass(frozen=True)
class BatchWriteResult:
    batch_id: str
    entries: int
    control_entries: int

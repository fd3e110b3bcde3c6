from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set


@dataclass(frozen=True)
class RowIdentity:
    raw: str
    token: str
    candidate_test_id: Optional[int]
    is_spike: bool = False


@dataclass
class TestIndex:
    __test__ = False

    batch_id: str
    test_ids: Set[int] = field(default_factory=set)
    sample_tests: Dict[int, List[int]] = field(default_factory=dict)
    test_samples: Dict[int, int] = field(default_factory=dict)
    pages_fetched: int = 0

    def add(self, test_id: int, sample_id: int) -> None:
        self.test_ids.add(test_id)
        self.test_samples[test_id] = sample_id
        tests = self.sample_tests.setdefault(sample_id, [])
        if test_id not in tests:
            tests.append(test_id)

    def sample_of(self, test_id: int) -> Optional[int]:
        return self.test_samples.get(test_id)

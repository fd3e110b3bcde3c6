from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Assay:
    id: int
    title: str
    param_set_id: Optional[str]


@dataclass(frozen=True)
class Batch:
    id: str
    assay: Assay


@dataclass(frozen=True)
class Test:
    __test__ = False

    id: int
    sample_id: int


@dataclass(frozen=True)
class TestPage:
    __test__ = False

    tests: List[Test]
    total_pages: int = 1


@dataclass(frozen=True)
class Sample:
    id: int
    qc_flag: bool = False

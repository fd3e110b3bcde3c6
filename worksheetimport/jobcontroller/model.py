from dataclasses import dataclass, field
from typing import Dict, List

from worksheetimport.identityresolver.identityresolver import SampleQcCache
from worksheetimport.paramresolver.paramresolver import ParameterCache
from worksheetimport.services.api import (
    BatchService,
    Console,
    LoggingConsole,
    NullProgressBar,
    ParameterStore,
    ProgressBar,
    SampleService,
    TestService,
)


@dataclass(frozen=True)
class ImportServices:
    batches: BatchService
    tests: TestService
    samples: SampleService
    parameters: ParameterStore
    console: Console = field(default_factory=LoggingConsole)
    progress: ProgressBar = field(default_factory=NullProgressBar)


@dataclass(frozen=True)
class RunCaches:
    """State shared by all files of one import run."""

    parameters: ParameterCache
    sample_flags: SampleQcCache


@dataclass(frozen=True)
class JobResult:
    job_id: str
    file_path: str
    batch_id: str
    status: str  # DONE|FAILED
    details: Dict[str, object]


@dataclass(frozen=True)
class RunResult:
    jobs: List[JobResult]
    success: bool

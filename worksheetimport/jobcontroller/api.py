from __future__ import annotations

from typing import Optional, Sequence

from worksheetimport.fileparser.model import FileFormat
from .jobcontroller import JobController
from .model import ImportServices, JobResult, RunCaches, RunResult


def run_import(
    file_paths: Sequence[str],
    services: ImportServices,
    file_format: Optional[FileFormat] = None,
) -> RunResult:
    """Public API (JobController)

    Contract:
    - Files are processed one after the other, in the given order.
    - Parameter sets and sample QC flags are cached for the whole run.
    - A failing file is logged and reported; the next file still runs.
    - success is True only if every file ended DONE.
    - file_format overrides detection by extension (.txt -> A, .csv -> B).
    """
    return JobController(services).run(file_paths, file_format)


def submit(
    file_path: str,
    services: ImportServices,
    caches: Optional[RunCaches] = None,
    file_format: Optional[FileFormat] = None,
) -> JobResult:
    """Public API (JobController)

    Contract:
    - job_id = sha256(file_bytes)[:16]
    - batch_id = lower-cased file name without extension
    - serial pipeline: batch -> parameters -> tests -> parse -> rows -> test worksheets -> batch worksheet
    - status DONE|FAILED; details carry the step trail and, on failure, the error
    """
    return JobController(services, caches).submit(file_path, file_format)

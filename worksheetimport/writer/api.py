from __future__ import annotations

from typing import List

from worksheetimport.accumulator.model import WorksheetDocument
from worksheetimport.identityresolver.identityresolver import SampleQcCache
from worksheetimport.identityresolver.model import TestIndex
from worksheetimport.services.api import BatchService, Console, TestService
from .model import BatchWriteResult, TestWriteResult
from .writer import Writer, WriterError


def write_test_worksheets(
    document: WorksheetDocument,
    index: TestIndex,
    qc_flags: SampleQcCache,
    analytes: List[str],
    tests: TestService,
    console: Console,
) -> List[TestWriteResult]:
    """Public API (Writer, per-test merge)

    Contract:
    - One update per sample: the sample's first test id is the merge target.
    - QC samples and samples without new readings are not written.
    - ws_instrument_results[analyte][test_id] is overlaid for every new reading
      of the sample's tests; every other key and field is kept as stored.
    - analytes must already exclude aggregate ("total") codes.
    - Sequential; a failing sample is logged and reported as "failed".
    """
    return Writer().write_test_worksheets(document, index, qc_flags, analytes, tests, console)


def write_batch_worksheet(
    batch_id: str,
    document: WorksheetDocument,
    batches: BatchService,
    console: Console,
) -> BatchWriteResult:
    """Public API (Writer, batch worksheet)

    Contract:
    - One patch with JSON-encoded testing_file_order and control_data.
    - Store failure -> WriterError (not handled here).
    """
    return Writer().write_batch_worksheet(batch_id, document, batches, console)

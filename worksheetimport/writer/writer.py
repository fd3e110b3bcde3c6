from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from worksheetimport.accumulator.model import WorksheetDocument
from worksheetimport.identityresolver.identityresolver import SampleQcCache
from worksheetimport.identityresolver.model import TestIndex
from worksheetimport.services.api import BatchService, Console, ServiceError, TestService
from .model import BatchWriteResult, TestWriteResult

_LOG = logging.getLogger(__name__)

INSTRUMENT_RESULTS_FIELD: str = "ws_instrument_results"
JSON_SEPARATORS = (",", ":")

# analyte -> test id (as string) -> value
InstrumentResults = Dict[str, Dict[str, Any]]


class WriterError(RuntimeError):
    pass


def decode_instrument_results(worksheet: Dict[str, Any]) -> InstrumentResults:
    field = worksheet.get(INSTRUMENT_RESULTS_FIELD)
    text = field.get("value") if isinstance(field, dict) else field
    if not text:
        return {}
    if isinstance(text, dict):
        return dict(text)
    try:
        decoded = json.loads(text)
    except (TypeError, ValueError):
        _LOG.warning("Ignoring unparseable %s: %r", INSTRUMENT_RESULTS_FIELD, text)
        return {}
    return decoded if isinstance(decoded, dict) else {}


def encode_instrument_results(results: InstrumentResults) -> Dict[str, str]:
    return {"value": json.dumps(results, separators=JSON_SEPARATORS)}


class Writer:
    def write_test_worksheets(
        self,
        document: WorksheetDocument,
        index: TestIndex,
        qc_flags: SampleQcCache,
        analytes: List[str],
        tests: TestService,
        console: Console,
    ) -> List[TestWriteResult]:
        results: List[TestWriteResult] = []
        for sample_id, test_ids in index.sample_tests.items():
            target_test_id = test_ids[0]

            if not any(document.has_readings(t) for t in test_ids):
                results.append(TestWriteResult(sample_id=sample_id, test_id=target_test_id, status="no_data"))
                continue

            if qc_flags.is_qc(sample_id):
                console.log(f"Skipping test worksheet update for QC sample {sample_id}")
                results.append(TestWriteResult(sample_id=sample_id, test_id=target_test_id, status="skipped_qc"))
                continue

            # one failing sample must not stop the others
            try:
                worksheet = dict(tests.get_worksheet(target_test_id) or {})
                merged = self.merge_instrument_results(
                    decode_instrument_results(worksheet), document, analytes, test_ids
                )
                worksheet[INSTRUMENT_RESULTS_FIELD] = encode_instrument_results(merged)
                tests.update_worksheet(target_test_id, worksheet, run_calculations=True)
            except Exception as e:
                console.log(f"Error updating test worksheet for sample {sample_id}: {e}")
                results.append(
                    TestWriteResult(sample_id=sample_id, test_id=target_test_id, status="failed", error=str(e))
                )
                continue

            console.log(f"Test worksheet updated for sample {sample_id}")
            results.append(TestWriteResult(sample_id=sample_id, test_id=target_test_id, status="updated"))
        return results

    def merge_instrument_results(
        self,
        existing: InstrumentResults,
        document: WorksheetDocument,
        analytes: List[str],
        test_ids: List[int],
    ) -> InstrumentResults:
        merged: InstrumentResults = dict(existing)
        for analyte in analytes:
            updates = {
                str(t): document.readings[(analyte, t)] for t in test_ids if (analyte, t) in document.readings
            }
            bucket = merged.get(analyte)
            if isinstance(bucket, dict):
                bucket = dict(bucket)
            elif bucket is None or updates:
                bucket = {}
            else:
                continue
            bucket.update(updates)
            merged[analyte] = bucket
        return merged

    def write_batch_worksheet(
        self,
        batch_id: str,
        document: WorksheetDocument,
        batches: BatchService,
        console: Console,
    ) -> BatchWriteResult:
        payload = {
            "testing_file_order": json.dumps(document.testing_file_order, separators=JSON_SEPARATORS),
            "control_data": json.dumps(document.control_data, separators=JSON_SEPARATORS),
        }
        try:
            batches.patch_worksheet(batch_id, payload)
        except ServiceError as e:
            raise WriterError(f"Error updating batch worksheet for batch {batch_id}: {e}") from e

        console.log(f"Batch worksheet updated for batch {batch_id}")
        return BatchWriteResult(
            batch_id=batch_id,
            entries=len(document.testing_file_order),
            control_entries=len(document.control_data),
        )

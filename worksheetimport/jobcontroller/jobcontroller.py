from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from worksheetimport.accumulator.api import new_accumulator
from worksheetimport.columnmapper.api import map_columns
from worksheetimport.fileparser.api import batch_id_from_filename, detect_format, parse
from worksheetimport.fileparser.model import FileFormat
from worksheetimport.identityresolver.api import fetch_batch, load_test_index, parse_identity
from worksheetimport.identityresolver.identityresolver import SampleQcCache
from worksheetimport.paramresolver.api import resolve_parameters
from worksheetimport.paramresolver.paramresolver import ParameterCache
from worksheetimport.qcclassifier.api import new_classifier
from worksheetimport.qcclassifier.model import RowKind
from worksheetimport.writer.api import write_batch_worksheet, write_test_worksheets
from .model import ImportServices, JobResult, RunCaches, RunResult

_LOG = logging.getLogger(__name__)

PROGRESS_BATCH: int = 15
PROGRESS_PARAMETERS: int = 30
PROGRESS_TESTS: int = 45
PROGRESS_PARSED: int = 60
PROGRESS_ROWS: int = 75
PROGRESS_TEST_WORKSHEETS: int = 90
PROGRESS_DONE: int = 100


class JobController:
    def __init__(self, services: ImportServices, caches: Optional[RunCaches] = None) -> None:
        self.services = services
        self.caches = caches or RunCaches(
            parameters=ParameterCache(),
            sample_flags=SampleQcCache(services.samples, services.console),
        )

    def run(self, file_paths: Sequence[str], file_format: Optional[FileFormat] = None) -> RunResult:
        console = self.services.console
        progress = self.services.progress
        progress.set_percentage(0)
        console.log("Begin process...")

        # strictly one file after the other
        jobs: List[JobResult] = [self.submit(p, file_format) for p in file_paths]

        progress.set_percentage(PROGRESS_DONE)
        failed = [j for j in jobs if j.status != "DONE"]
        if failed:
            console.log(f"Finished with errors: {len(failed)} of {len(jobs)} files failed")
        else:
            console.log("All files processed successfully!")
        return RunResult(jobs=jobs, success=not failed)

    def submit(self, file_path: str, file_format: Optional[FileFormat] = None) -> JobResult:
        path = Path(file_path)
        console = self.services.console
        progress = self.services.progress

        if not path.is_file():
            console.log(f"Error processing file {path.name}: file not found")
            return self._result("FAILED", "", str(path), "", {"error": "file_not_found"})

        batch_id = batch_id_from_filename(path.name)
        state: Dict[str, Any] = {"job_id": "", "batch_id": batch_id, "status": "STARTED", "steps": []}

        try:
            state["job_id"] = self._hash_file(path)
            fmt = file_format or detect_format(path.name)

            # BATCH
            console.log(f"Fetching batch: {batch_id}")
            batch = fetch_batch(self.services.batches, batch_id)
            state["status"] = "BATCH_FETCHED"
            state["steps"].append({"step": "batch", "assay_id": batch.assay.id})
            progress.set_percentage(PROGRESS_BATCH)

            # PARAMETERS
            cached = batch.assay.id in self.caches.parameters
            params = resolve_parameters(batch.assay, self.services.parameters, self.caches.parameters)
            console.log(
                f"{'Using cached' if cached else 'Fetched'} parameters for Assay {batch.assay.id}: {batch.assay.title}"
            )
            state["status"] = "PARAMETERS_RESOLVED"
            state["steps"].append({"step": "paramresolver", "param_set_id": params.param_set_id, "cached": cached})
            progress.set_percentage(PROGRESS_PARAMETERS)

            # TESTS
            console.log(f"Fetching tests for batch {batch_id}")
            index = load_test_index(self.services.tests, batch_id)
            state["status"] = "TESTS_INDEXED"
            state["steps"].append({
                "step": "identityresolver",
                "tests": len(index.test_ids),
                "samples": len(index.sample_tests),
                "pages": index.pages_fetched,
            })
            progress.set_percentage(PROGRESS_TESTS)

            # PARSE
            console.log(f"Parsing file: {path.name}")
            parsed = parse(str(path), fmt)
            column_map = map_columns(parsed.header, params.data_columns_to_analytes)
            state["status"] = "PARSED"
            state["steps"].append({
                "step": "fileparser",
                "format": fmt.name,
                "rows": parsed.meta.get("row_count"),
                "columns": {str(k): v for k, v in sorted(column_map.items())},
            })
            progress.set_percentage(PROGRESS_PARSED)

            # CLASSIFY + ACCUMULATE
            classifier = new_classifier(params.qc_types)
            accumulator = new_accumulator(column_map)
            skipped: List[str] = []
            for row in parsed.data_rows:
                if not row[0].strip():
                    continue
                field = row[fmt.identity_field] if fmt.identity_field < len(row) else ""
                identity = parse_identity(field, fmt.spike_qualifier)
                classification = classifier.classify(identity, index, self.caches.sample_flags)
                if classification.kind is RowKind.SKIPPED:
                    console.log(f"Skipping unrecognized sample: {identity.token}")
                    skipped.append(identity.raw)
                    continue
                if classification.kind is RowKind.FLAGGED_QC:
                    console.log(
                        f"Adding {classification.qc_type} (test {classification.test_id}, "
                        f"sample {classification.sample_id}) to batch worksheet"
                    )
                accumulator.add_row(classification, row)

            document = accumulator.document
            state["status"] = "CLASSIFIED"
            state["steps"].append({
                "step": "qcclassifier",
                "entries": len(document.testing_file_order),
                "control_entries": len(document.control_data),
                "skipped": skipped,
            })
            progress.set_percentage(PROGRESS_ROWS)

            # TEST WORKSHEETS
            console.log("Updating test worksheets...")
            test_writes = write_test_worksheets(
                document,
                index,
                self.caches.sample_flags,
                params.raw_analytes,
                self.services.tests,
                console,
            )
            state["steps"].append({
                "step": "writer_tests",
                "writes": [{"sample_id": w.sample_id, "test_id": w.test_id, "status": w.status} for w in test_writes],
            })
            progress.set_percentage(PROGRESS_TEST_WORKSHEETS)

            # BATCH WORKSHEET
            console.log("Updating batch worksheet...")
            batch_write = write_batch_worksheet(batch_id, document, self.services.batches, console)
            state["steps"].append({
                "step": "writer_batch",
                "entries": batch_write.entries,
                "control_entries": batch_write.control_entries,
            })

            state["status"] = "DONE"
            console.log(f"Finished processing {path.name}")
            return self._result("DONE", state["job_id"], str(path), batch_id, {"steps": state["steps"]})

        except Exception as e:
            _LOG.debug("Import of %s failed in state %s", path.name, state["status"], exc_info=True)
            console.log(f"Error processing file {path.name}: {e}")
            return self._result(
                "FAILED",
                state["job_id"],
                str(path),
                batch_id,
                {"error": str(e), "failed_after": state["status"], "steps": state["steps"]},
            )

    def _hash_file(self, path: Path) -> str:
        h = hashlib.sha256()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(1024 * 1024), b""):
                h.update(chunk)
        return h.hexdigest()[:16]

    def _result(self, status: str, job_id: str, file_path: str, batch_id: str, details: Dict[str, object]) -> JobResult:
        return JobResult(job_id=job_id, file_path=file_path, batch_id=batch_id, status=status, details=details)

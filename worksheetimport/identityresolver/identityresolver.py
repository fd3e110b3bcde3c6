from __future__ import annotations

import logging
from typing import Dict, Optional

from worksheetimport.services.api import BatchService, Console, SampleService, ServiceError, TestService
from worksheetimport.services.model import Batch
from .model import RowIdentity, TestIndex

_LOG = logging.getLogger(__name__)

TOKEN_SEPARATOR: str = "_"


class IdentityResolverError(RuntimeError):
    pass


class SampleQcCache:
    """Sample id -> QC flag, filled on first reference and kept for the whole run."""

    def __init__(self, samples: SampleService, console: Console) -> None:
        self._samples = samples
        self._console = console
        self._flags: Dict[int, bool] = {}

    def is_qc(self, sample_id: int) -> bool:
        if sample_id in self._flags:
            return self._flags[sample_id]
        try:
            sample = self._samples.get(sample_id)
            flag = bool(sample.qc_flag)
        except ServiceError as e:
            self._console.log(f"Warning: Could not fetch sample {sample_id}: {e}")
            flag = False
        if flag:
            self._console.log(f"Sample {sample_id} is a QC sample (matrix blank/spike)")
        self._flags[sample_id] = flag
        return flag


class IdentityResolver:
    def fetch_batch(self, batches: BatchService, batch_id: str) -> Batch:
        try:
            return batches.get(batch_id)
        except ServiceError as e:
            raise IdentityResolverError(f"Error fetching batch {batch_id}: {e}") from e

    def load_test_index(self, tests: TestService, batch_id: str) -> TestIndex:
        index = TestIndex(batch_id=batch_id)
        page = self._fetch_page(tests, batch_id, 1)
        index.pages_fetched = 1
        for test in page.tests:
            index.add(test.id, test.sample_id)

        for page_num in range(2, page.total_pages + 1):
            next_page = self._fetch_page(tests, batch_id, page_num)
            index.pages_fetched += 1
            for test in next_page.tests:
                index.add(test.id, test.sample_id)

        _LOG.debug("Batch %s: %d tests on %d pages", batch_id, len(index.test_ids), index.pages_fetched)
        return index

    def parse_identity(self, field: str, spike_qualifier: Optional[str]) -> RowIdentity:
        raw = str(field).replace("\r", "").strip()
        token = raw.split(TOKEN_SEPARATOR, 1)[0].strip()

        candidate = token
        is_spike = False
        if spike_qualifier and candidate.lower().endswith(spike_qualifier.lower()):
            candidate = candidate[: -len(spike_qualifier)]
            is_spike = True

        return RowIdentity(raw=raw, token=token, candidate_test_id=self._to_test_id(candidate), is_spike=is_spike)

    def _fetch_page(self, tests: TestService, batch_id: str, page_num: int):
        try:
            return tests.list_page(batch_id, page_num)
        except ServiceError as e:
            raise IdentityResolverError(f"Error fetching tests page {page_num} for batch {batch_id}: {e}") from e

    def _to_test_id(self, text: str) -> Optional[int]:
        text = text.strip()
        if not (text.isascii() and text.isdigit()):
            return None
        return int(text)

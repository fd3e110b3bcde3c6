from __future__ import annotations

from typing import Optional

from worksheetimport.services.api import BatchService, TestService
from worksheetimport.services.model import Batch
from .identityresolver import IdentityResolver, IdentityResolverError, SampleQcCache
from .model import RowIdentity, TestIndex


def fetch_batch(batches: BatchService, batch_id: str) -> Batch:
    """Public API (IdentityResolver)

    Contract:
    - Store failure -> IdentityResolverError.
    """
    return IdentityResolver().fetch_batch(batches, batch_id)


def load_test_index(tests: TestService, batch_id: str) -> TestIndex:
    """Public API (IdentityResolver)

    Contract:
    - Fetch page 1, then every page up to total_pages, in order.
    - Every page is folded into test_ids and sample_tests before returning.
    - Any page failure -> IdentityResolverError (no partial index).
    """
    return IdentityResolver().load_test_index(tests, batch_id)


def parse_identity(field: str, spike_qualifier: Optional[str] = None) -> RowIdentity:
    """Public API (IdentityResolver)

    Contract:
    - token = identity field up to the first "_".
    - A trailing spike qualifier (case-insensitive) is stripped and reported.
    - candidate_test_id = remaining digits as int, else None.
    """
    return IdentityResolver().parse_identity(field, spike_qualifier)

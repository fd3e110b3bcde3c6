import json
from typing import Any, Dict, List, Tuple

import pytest

from worksheetimport.jobcontroller.model import ImportServices
from worksheetimport.services.api import (
    BatchService,
    Console,
    ParameterStore,
    ProgressBar,
    SampleService,
    ServiceError,
    TestService,
)
from worksheetimport.services.model import Assay, Batch, Sample, Test, TestPage


PARAMS = {
    "data_columns_to_analytes": {"CBD": "cbd", "THC": "thc"},
    "qc_types": ["ccv", "mb"],
    "worksheet_analytes": ["cbd", "thc", "total_cannabinoids"],
}


class FakeBatches(BatchService):
    def __init__(self, batches: Dict[str, Batch]):
        self.batches = batches
        self.patches: List[Tuple[str, Dict[str, str]]] = []
        self.fail_patch = False
        self.get_calls: List[str] = []

    def get(self, batch_id):
        self.get_calls.append(batch_id)
        if batch_id not in self.batches:
            raise ServiceError(f"batch {batch_id} not found")
        return self.batches[batch_id]

    def patch_worksheet(self, batch_id, data):
        if self.fail_patch:
            raise ServiceError("patch rejected")
        self.patches.append((batch_id, data))


class FakeTests(TestService):
    def __init__(self, pages: Dict[str, List[List[Test]]], worksheets: Dict[int, Dict[str, Any]] = None):
        self.pages = pages
        self.worksheets = worksheets if worksheets is not None else {}
        self.page_calls: List[Tuple[str, int]] = []
        self.updates: List[Tuple[int, Dict[str, Any], bool]] = []
        self.fail_update_for: set = set()
        self.fail_page: int = 0

    def list_page(self, batch_id, page_num):
        self.page_calls.append((batch_id, page_num))
        if page_num == self.fail_page:
            raise ServiceError(f"page {page_num} unavailable")
        pages = self.pages[batch_id]
        return TestPage(tests=list(pages[page_num - 1]), total_pages=len(pages))

    def get_worksheet(self, test_id):
        return json.loads(json.dumps(self.worksheets.get(test_id, {})))

    def update_worksheet(self, test_id, worksheet, run_calculations=True):
        if test_id in self.fail_update_for:
            raise ServiceError(f"update of test {test_id} rejected")
        self.updates.append((test_id, worksheet, run_calculations))
        self.worksheets[test_id] = json.loads(json.dumps(worksheet))


class FakeSamples(SampleService):
    def __init__(self, qc_flags: Dict[int, bool], failing: set = frozenset()):
        self.qc_flags = qc_flags
        self.failing = set(failing)
        self.calls: List[int] = []

    def get(self, sample_id):
        self.calls.append(sample_id)
        if sample_id in self.failing:
            raise ServiceError(f"sample {sample_id} unavailable")
        return Sample(id=sample_id, qc_flag=self.qc_flags.get(sample_id, False))


class FakeParameters(ParameterStore):
    def __init__(self, entries: Dict[str, Dict[str, Any]]):
        self.entries = entries
        self.calls: List[str] = []

    def get(self, param_set_id):
        self.calls.append(param_set_id)
        if param_set_id not in self.entries:
            raise ServiceError(f"kv entry {param_set_id} not found")
        return self.entries[param_set_id]


class RecordingConsole(Console):
    def __init__(self):
        self.messages: List[str] = []

    def log(self, message):
        self.messages.append(message)


class RecordingProgress(ProgressBar):
    def __init__(self):
        self.values: List[int] = []

    def set_percentage(self, value):
        self.values.append(value)


def make_batch(batch_id: str, assay_id: int = 7, param_set_id: str = "params-7") -> Batch:
    return Batch(id=batch_id, assay=Assay(id=assay_id, title="Cannabinoids", param_set_id=param_set_id))


@pytest.fixture
def console():
    return RecordingConsole()


@pytest.fixture
def services(console):
    """Batch "b1": tests 101 (sample 1), 102 (sample 1), 205 (sample 2, QC)."""
    return ImportServices(
        batches=FakeBatches({"b1": make_batch("b1")}),
        tests=FakeTests({"b1": [[Test(101, 1), Test(102, 1)], [Test(205, 2)]]}),
        samples=FakeSamples({1: False, 2: True}),
        parameters=FakeParameters({"params-7": PARAMS}),
        console=console,
        progress=RecordingProgress(),
    )

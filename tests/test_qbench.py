import json

import pytest
import requests

from conftest import RecordingConsole
from worksheetimport.identityresolver.identityresolver import SampleQcCache
from worksheetimport.services.api import ServiceError
from worksheetimport.services.qbench import (
    QBenchBatchService,
    QBenchClient,
    QBenchParameterStore,
    QBenchSampleService,
    QBenchTestService,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.content = b"" if payload is None else json.dumps(payload).encode("utf-8")
        self.text = self.content.decode("utf-8")

    def json(self):
        return json.loads(self.content)


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(*responses):
    session = FakeSession(responses)
    return QBenchClient("https://lims.example.com/", session), session


def test_batch_get_maps_assay():
    client, session = _client(
        FakeResponse(payload={"id": 12, "assay": {"id": 7, "title": "Cannabinoids", "assay_params": "kv-1"}})
    )
    batch = QBenchBatchService(client).get("12")
    assert batch.id == "12"
    assert (batch.assay.id, batch.assay.title, batch.assay.param_set_id) == (7, "Cannabinoids", "kv-1")
    assert session.calls[0][:2] == ("GET", "https://lims.example.com/api/v1/batch/12")


def test_list_page_passes_page_number_after_first():
    client, session = _client(
        FakeResponse(payload={"data": [{"id": 1, "sample": {"id": 10}}], "total_pages": 3}),
        FakeResponse(payload={"data": [{"id": 2, "sample": {"id": 11}}], "total_pages": 3}),
    )
    service = QBenchTestService(client)

    first = service.list_page("12", 1)
    second = service.list_page("12", 2)

    assert first.total_pages == 3
    assert [(t.id, t.sample_id) for t in first.tests + second.tests] == [(1, 10), (2, 11)]
    assert session.calls[0][2]["params"] == {"batch_ids": "12"}
    assert session.calls[1][2]["params"] == {"batch_ids": "12", "page_num": 2}


def test_worksheet_round_trip_requests():
    client, session = _client(
        FakeResponse(payload={"101": {"data": {"ws_instrument_results": {"value": "{}"}}}}),
        FakeResponse(),
    )
    service = QBenchTestService(client)

    worksheet = service.get_worksheet(101)
    service.update_worksheet(101, worksheet)

    assert worksheet == {"ws_instrument_results": {"value": "{}"}}
    method, url, kwargs = session.calls[1]
    assert (method, url) == ("PATCH", "https://lims.example.com/api/v1/test/101")
    assert kwargs["params"] == {"run_worksheet_calculations": "true"}
    assert kwargs["json"] == {"id": 101, "worksheet_json": worksheet}


def test_sample_and_kvstore():
    client, _ = _client(
        FakeResponse(payload={"id": 5, "qc_flag": True}),
        FakeResponse(payload={"data": {"qc_types": ["ccv"]}}),
    )
    assert QBenchSampleService(client).get(5).qc_flag is True
    assert QBenchParameterStore(client).get("kv-1") == {"qc_types": ["ccv"]}


def test_http_and_transport_errors_become_service_errors():
    client, _ = _client(FakeResponse(status_code=404, payload={"error": "nope"}), requests.ConnectionError("down"))
    with pytest.raises(ServiceError):
        QBenchSampleService(client).get(5)
    with pytest.raises(ServiceError):
        QBenchBatchService(client).patch_worksheet("12", {})


def test_malformed_sample_payload_is_a_service_error():
    client, _ = _client(FakeResponse(payload={"id": None, "qc_flag": True}))
    with pytest.raises(ServiceError):
        QBenchSampleService(client).get(5)


def test_malformed_sample_payload_counts_as_not_qc():
    client, _ = _client(FakeResponse(payload={"id": "x", "qc_flag": True}))
    console = RecordingConsole()
    cache = SampleQcCache(QBenchSampleService(client), console)
    assert cache.is_qc(5) is False
    assert console.messages[0].startswith("Warning: Could not fetch sample 5")

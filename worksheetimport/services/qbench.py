from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .api import BatchService, ParameterStore, SampleService, ServiceError, TestService
from .model import Assay, Batch, Sample, Test, TestPage

_LOG = logging.getLogger(__name__)


class QBenchClient:
    """Thin JSON client for a QBench-style LIMS REST API.

    Authentication is the caller's business: pass a pre-configured session.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self.url(path)
        _LOG.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise ServiceError(f"{method} {url} failed: {e}") from e

        if response.status_code >= 400:
            raise ServiceError(f"{method} {url} failed: {response.status_code} {response.text}")
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ServiceError(f"{method} {url} returned invalid JSON: {e}") from e


class QBenchBatchService(BatchService):
    def __init__(self, client: QBenchClient) -> None:
        self.client = client

    def get(self, batch_id: str) -> Batch:
        data = self.client.request("GET", f"/api/v1/batch/{batch_id}")
        try:
            assay = data["assay"]
            return Batch(
                id=str(data.get("id", batch_id)),
                assay=Assay(
                    id=int(assay["id"]),
                    title=str(assay.get("title", "")),
                    param_set_id=assay.get("assay_params"),
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ServiceError(f"Unexpected batch payload for {batch_id}: {e}") from e

    def patch_worksheet(self, batch_id: str, data: Dict[str, str]) -> None:
        self.client.request("PATCH", f"/api/v1/batch/{batch_id}/worksheet", json=data)


class QBenchTestService(TestService):
    def __init__(self, client: QBenchClient) -> None:
        self.client = client

    def list_page(self, batch_id: str, page_num: int) -> TestPage:
        params: Dict[str, Any] = {"batch_ids": batch_id}
        if page_num > 1:
            params["page_num"] = page_num
        data = self.client.request("GET", "/api/v1/test", params=params)
        try:
            tests: List[Test] = [
                Test(id=int(t["id"]), sample_id=int(t["sample"]["id"])) for t in data.get("data", [])
            ]
            total_pages = int(data.get("total_pages") or 1)
        except (KeyError, TypeError, ValueError) as e:
            raise ServiceError(f"Unexpected test listing for batch {batch_id}: {e}") from e
        return TestPage(tests=tests, total_pages=total_pages)

    def get_worksheet(self, test_id: int) -> Dict[str, Any]:
        data = self.client.request("GET", "/tests/worksheets/getdata", params={"ids": test_id})
        entry = (data or {}).get(str(test_id)) or {}
        return dict(entry.get("data") or {})

    def update_worksheet(self, test_id: int, worksheet: Dict[str, Any], run_calculations: bool = True) -> None:
        self.client.request(
            "PATCH",
            f"/api/v1/test/{test_id}",
            params={"run_worksheet_calculations": "true" if run_calculations else "false"},
            json={"id": test_id, "worksheet_json": worksheet},
        )


class QBenchSampleService(SampleService):
    def __init__(self, client: QBenchClient) -> None:
        self.client = client

    def get(self, sample_id: int) -> Sample:
        data = self.client.request("GET", f"/api/v1/sample/{sample_id}")
        if not isinstance(data, dict):
            raise ServiceError(f"Unexpected sample payload for {sample_id}")
        try:
            return Sample(id=int(data.get("id", sample_id)), qc_flag=data.get("qc_flag") is True)
        except (KeyError, TypeError, ValueError) as e:
            raise ServiceError(f"Unexpected sample payload for {sample_id}: {e}") from e


class QBenchParameterStore(ParameterStore):
    def __init__(self, client: QBenchClient) -> None:
        self.client = client

    def get(self, param_set_id: str) -> Dict[str, Any]:
        data = self.client.request("GET", f"/api/v1/kvstore/{param_set_id}")
        values = (data or {}).get("data")
        if not isinstance(values, dict):
            raise ServiceError(f"KV store entry {param_set_id} has no data object")
        return values

from __future__ import annotations

import logging
import os
from pathlib import Path

import requests

from worksheetimport.fileparser.model import FORMATS
from worksheetimport.jobcontroller.api import run_import
from worksheetimport.jobcontroller.model import ImportServices
from worksheetimport.services.qbench import (
    QBenchBatchService,
    QBenchClient,
    QBenchParameterStore,
    QBenchSampleService,
    QBenchTestService,
)


def build_services(base_url: str, api_token: str | None) -> ImportServices:
    session = requests.Session()
    if api_token:
        session.headers["Authorization"] = f"Bearer {api_token}"
    client = QBenchClient(base_url, session)
    return ImportServices(
        batches=QBenchBatchService(client),
        tests=QBenchTestService(client),
        samples=QBenchSampleService(client),
        parameters=QBenchParameterStore(client),
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    project_root = Path(__file__).resolve().parent
    base_url = os.environ["WORKSHEETIMPORT_BASE_URL"]
    input_dir = Path(os.environ.get("WORKSHEETIMPORT_INPUT_DIR", project_root / "input"))
    files = sorted(str(p) for p in input_dir.iterdir() if p.suffix.lower() in FORMATS)

    services = build_services(base_url, os.environ.get("WORKSHEETIMPORT_API_TOKEN"))
    result = run_import(files, services)

    for res in result.jobs:
        print("=" * 50)
        print(f"FILE: {Path(res.file_path).name}")
        print("=" * 50)
        print(f"status: {res.status}")
        print(f"job_id: {res.job_id}")
        print(f"batch_id: {res.batch_id}")
        if res.details.get("error"):
            print(f"error: {res.details['error']}")
        print()

    raise SystemExit(0 if result.success else 1)


if __name__ == "__main__":
    main()

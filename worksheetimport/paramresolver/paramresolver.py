from __future__ import annotations

import logging
from typing import Any, Dict, List

from worksheetimport.services.api import ParameterStore, ServiceError
from worksheetimport.services.model import Assay
from .model import AssayParameterSet

_LOG = logging.getLogger(__name__)


class ParamResolverError(RuntimeError):
    pass


class ParameterCache:
    """Assay id -> AssayParameterSet.

    Lives for one import run and is shared by every file of that run.
    Entries are never replaced once stored.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, AssayParameterSet] = {}

    def __contains__(self, assay_id: int) -> bool:
        return assay_id in self._entries

    def get(self, assay_id: int) -> AssayParameterSet | None:
        return self._entries.get(assay_id)

    def put(self, params: AssayParameterSet) -> AssayParameterSet:
        return self._entries.setdefault(params.assay_id, params)


class ParamResolver:
    def resolve(self, assay: Assay, store: ParameterStore, cache: ParameterCache) -> AssayParameterSet:
        cached = cache.get(assay.id)
        if cached is not None:
            _LOG.debug("Using cached parameters for assay %s", assay.id)
            return cached

        if not assay.param_set_id:
            raise ParamResolverError(f"Assay {assay.id}: {assay.title} has no parameter set")

        try:
            data = store.get(assay.param_set_id)
        except ServiceError as e:
            raise ParamResolverError(f"Error fetching parameters for Assay {assay.id}: {assay.title}: {e}") from e

        return cache.put(self.build(assay.id, assay.param_set_id, data))

    def build(self, assay_id: int, param_set_id: str, data: Dict[str, Any]) -> AssayParameterSet:
        columns = data.get("data_columns_to_analytes")
        if not isinstance(columns, dict) or not columns:
            raise ParamResolverError(f"Parameter set {param_set_id} missing data_columns_to_analytes")

        qc_types = data.get("qc_types") or []
        if not isinstance(qc_types, list):
            raise ParamResolverError(f"Parameter set {param_set_id}: qc_types must be a list")

        worksheet_analytes = data.get("worksheet_analytes")
        if worksheet_analytes is None:
            # older parameter sets only carry the column table
            worksheet_analytes = self._unique(columns.values())
        elif not isinstance(worksheet_analytes, list):
            raise ParamResolverError(f"Parameter set {param_set_id}: worksheet_analytes must be a list")

        return AssayParameterSet(
            assay_id=assay_id,
            param_set_id=param_set_id,
            data_columns_to_analytes={str(k).strip(): str(v) for k, v in columns.items()},
            qc_types=[str(t) for t in qc_types if str(t)],
            worksheet_analytes=[str(a) for a in worksheet_analytes],
        )

    def _unique(self, values) -> List[str]:
        out: List[str] = []
        for v in values:
            if v not in out:
                out.append(v)
        return out

from __future__ import annotations

from worksheetimport.services.api import ParameterStore
from worksheetimport.services.model import Assay
from .model import AssayParameterSet
from .paramresolver import ParamResolver, ParamResolverError, ParameterCache


def resolve_parameters(assay: Assay, store: ParameterStore, cache: ParameterCache) -> AssayParameterSet:
    """Public API (ParamResolver)

    Contract:
    - One store fetch per assay id per run; later calls are served from cache.
    - data_columns_to_analytes is required; qc_types defaults to [].
    - worksheet_analytes defaults to the analyte codes of the column table.
    - Fetch or validation failure -> ParamResolverError (nothing is cached).
    """
    return ParamResolver().resolve(assay, store, cache)

from dataclasses import dataclass
from typing import Dict, List


AGGREGATE_MARKER: str = "total"


@dataclass(frozen=True)
class AssayParameterSet:
    assay_id: int
    param_set_id: str
    data_columns_to_analytes: Dict[str, str]
    qc_types: List[str]
    worksheet_analytes: List[str]

    @property
    def raw_analytes(self) -> List[str]:
        """Worksheet analytes that receive instrument readings (aggregates excluded)."""
        return [a for a in self.worksheet_analytes if AGGREGATE_MARKER not in a]

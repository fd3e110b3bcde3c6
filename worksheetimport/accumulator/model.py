from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union


@dataclass
class WorksheetDocument:
    """Everything one file contributes to the batch and test worksheets."""

    testing_file_order: List[Union[int, str]] = field(default_factory=list)
    control_data: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    readings: Dict[Tuple[str, int], float] = field(default_factory=dict)

    def has_readings(self, test_id: int) -> bool:
        return any(tid == test_id for _, tid in self.readings)

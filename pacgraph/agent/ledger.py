from typing import Dict
from typeguard import typechecked

from pacgraph.core.console import *

DEAD_END_PENALTY = 999


@typechecked
class RecencyLedger:
    """
    Shared per-side record of how often each cell was chosen as a target.

    One instance is handed to every agent of a side. Agents read and write it
    in the order the game context processes them, so that order decides which
    agent claims a cell first. A value of 0 means never chosen.
    """

    def __init__(self, dead_end_penalty: int = DEAD_END_PENALTY):
        self.dead_end_penalty = dead_end_penalty
        self._values: Dict[int, int] = {}

    def get(self, cell_id: int) -> int:
        return self._values.get(cell_id, 0)

    def claim(self, cell_id: int, current_value: int, one_way: bool) -> int:
        """
        Mark cell_id as chosen. Dead ends jump straight to the penalty value,
        anything else goes one above current_value. Returns the stored value.
        """
        value = self.dead_end_penalty if one_way else current_value + 1
        self._values[cell_id] = value
        debug(f"Ledger claim {cell_id} -> {value}")
        return value

    def snapshot(self) -> Dict[int, int]:
        return dict(self._values)

    def __contains__(self, cell_id: int) -> bool:
        return self.get(cell_id) > 0

    def __len__(self) -> int:
        return len(self._values)

    def __str__(self) -> str:
        return f"RecencyLedger(entries={len(self._values)}, penalty={self.dead_end_penalty})"

from typing import Any, Dict, NamedTuple, Optional, Tuple
from typeguard import typechecked

from pacgraph.core.console import *
from pacgraph.maze.grid import Grid, GridError
from pacgraph.agent.ledger import RecencyLedger


class MoveCommand(NamedTuple):
    """Order for one agent to head toward (x, y)."""

    pac_id: int
    x: int
    y: int

    def __str__(self) -> str:
        return f"MOVE {self.pac_id} {self.x} {self.y}"


@typechecked
class Player:
    """
    One agent of our side.

    The agent coasts toward its target across turns and only picks a new one
    when it arrives or when it is observed standing still.
    """

    def __init__(self, grid: Grid, pac_id: int, x: int, y: int, visited: Optional[RecencyLedger] = None):
        """
        Parameters:
            grid (Grid): Established grid the agent moves on.
            pac_id (int): Identifier assigned by the game.
            x, y (int): Position at first sighting.
            visited (RecencyLedger, optional): Ledger shared with the rest of the side.
                A private one is created when omitted.
        """
        self.grid = grid
        self.pac_id = pac_id
        self.x = x
        self.y = y
        self.current_cell = self._cell_at(x, y)
        self.target: Tuple[int, int] = (x, y)
        self.visited = visited if visited is not None else RecencyLedger()

        self.update_target()

    def _cell_at(self, x: int, y: int) -> Any:
        cell = self.grid.get_cell(x, y)
        if cell is None:
            raise GridError(f"Pac {self.pac_id} observed on a wall at ({x}, {y})")
        return cell

    @property
    def is_target_reached(self) -> bool:
        return self.target == (self.x, self.y)

    def candidates(self) -> Dict[int, int]:
        """Node id -> steps to every Node reachable from the current cell."""
        return self.grid.neighbor_nodes(self.current_cell.id)

    def update_target(self, stuck: bool = False) -> Tuple[int, int]:
        """
        Pick the next Node to head for and claim it in the shared ledger.

        A never-chosen Node always beats a chosen one; among never-chosen Nodes
        the longest corridor wins, the first seen on ties. Among chosen Nodes
        the lowest ledger value wins. Without any candidate the agent targets
        its own cell and the ledger is left alone.
        """
        candidate_id, candidate_value, candidate_distance = -1, 0, 0

        for node_id, distance in self.candidates().items():
            visit = self.visited.get(node_id)
            if visit:
                if candidate_id == -1 or visit < candidate_value:
                    candidate_id, candidate_value, candidate_distance = node_id, visit, distance
            elif candidate_id == -1 or candidate_value > 0 or distance > candidate_distance:
                candidate_id, candidate_value, candidate_distance = node_id, 0, distance

        if candidate_id == -1:
            debug(f"Pac {self.pac_id} has no reachable node from ({self.x}, {self.y})")
            self.target = (self.x, self.y)
            return self.target

        self.visited.claim(candidate_id, candidate_value, self.grid.cells[candidate_id].one_way)
        self.target = self.grid.to_coords(candidate_id)
        debug(f"Pac {self.pac_id}{' (stuck)' if stuck else ''} targets {self.target} at distance {candidate_distance}")
        return self.target

    def update_coords(self, x: int, y: int) -> None:
        """
        Apply this turn's observed position. Standing still counts as stuck and
        forces a new target; reaching the target also picks the next one.
        """
        if (x, y) == (self.x, self.y):
            self.update_target(stuck=True)
            return

        self.current_cell = self._cell_at(x, y)
        self.current_cell.clear_value()
        self.x = x
        self.y = y

        if self.is_target_reached:
            self.update_target()

    def move(self) -> MoveCommand:
        return MoveCommand(self.pac_id, self.target[0], self.target[1])

    def __str__(self) -> str:
        return f"Player(id={self.pac_id}, pos=({self.x}, {self.y}), target={self.target})"

import os
from typing import Any, Dict, Iterable, List, NamedTuple, Optional
from typeguard import typechecked

from pacgraph.core.console import *
from pacgraph.core.logger import Logger
from pacgraph.config.config_loader import ConfigLoader
from pacgraph.maze.grid import Grid
from pacgraph.agent.ledger import RecencyLedger
from pacgraph.agent.player import MoveCommand, Player
from pacgraph.utils.graph_utils import compression_summary


class PacObservation(NamedTuple):
    """One visible pac as reported for a turn."""

    pac_id: int
    mine: bool
    x: int
    y: int
    type_id: str = ""
    speed_turns_left: int = 0
    ability_cooldown: int = 0


@typechecked
class GameContext:
    """
    Everything one side needs across turns: the established grid, our agents
    in first-sighting order and the ledger they share.

    Built once from the grid rows, then mutated only by process_turn().
    """

    def __init__(self, grid: Grid, config: Optional[ConfigLoader] = None, logger: Optional[Logger] = None):
        self.grid = grid
        self.config = config if config is not None else ConfigLoader()
        self.ledger = RecencyLedger(dead_end_penalty=self.config.get("agents", "dead_end_penalty"))
        self.stale_policy: str = self.config.get("pathfinding", "stale_policy")
        self.players: Dict[int, Player] = {}
        self.turn = 0
        self.summary = compression_summary(grid)
        info(f"Compressed graph: {self.summary}")

        self.logger = logger
        if self.logger is None and self.config.get("logging", "record_turns"):
            self.logger = Logger(
                self.config.get("logging", "log_name"),
                metadata={"width": grid.width, "height": grid.height, "graph": self.summary, "config": self.config.config_data},
                path=self.config.get("logging", "path"),
            )

    @classmethod
    def from_rows(cls, rows: Iterable[str], config: Optional[ConfigLoader] = None, logger: Optional[Logger] = None) -> "GameContext":
        config = config if config is not None else ConfigLoader()
        grid = Grid.from_rows(rows, wall_char=config.get("grid", "wall_char"))
        return cls(grid, config, logger)

    def observe(self, observation: PacObservation) -> Optional[Player]:
        """
        Feed one pac observation. Opponent pacs are ignored. A known pac gets its
        position updated; a new one is created with the shared ledger.
        """
        if not observation.mine:
            return None

        player = self.players.get(observation.pac_id)
        if player is None:
            player = Player(self.grid, observation.pac_id, observation.x, observation.y, self.ledger)
            self.players[observation.pac_id] = player
            debug(f"New pac {observation.pac_id} at ({observation.x}, {observation.y})")
        else:
            player.update_coords(observation.x, observation.y)
        return player

    def process_turn(self, observations: Iterable[PacObservation]) -> List[MoveCommand]:
        """Update every observed agent in order, then return one command per known agent."""
        self.turn += 1
        for observation in observations:
            self.observe(observation)

        commands = self.commands()
        self.log_turn()
        return commands

    def commands(self) -> List[MoveCommand]:
        return [player.move() for player in self.players.values()]

    def path_to_target(self, pac_id: int) -> List[int]:
        """Cell ids from the agent's position to its current target."""
        player = self.players[pac_id]
        return self.grid.shortest_path(player.x, player.y, player.target[0], player.target[1], stale_policy=self.stale_policy)

    def log_turn(self) -> None:
        if self.logger is None:
            return

        agents: Dict[str, Any] = {}
        for pac_id, player in self.players.items():
            path = self.path_to_target(pac_id)
            agents[str(pac_id)] = {"position": [player.x, player.y], "target": list(player.target), "distance": max(len(path) - 1, 0)}
        self.logger.log_turn(self.turn, {"agents": agents, "ledger_size": len(self.ledger)})

    def finish(self) -> Optional[str]:
        """Close the run: append a summary and write the turn log when recording is enabled."""
        if self.logger is None:
            return None

        self.logger.finalize(self.turn, agents=len(self.players), ledger=len(self.ledger))
        if self.logger.path:
            os.makedirs(self.logger.path, exist_ok=True)
        filename = self.logger.write_to_file()
        success(f"Turn log written to {os.path.join(self.logger.path, filename)}")
        return filename

    def __str__(self) -> str:
        return f"GameContext(turn={self.turn}, players={len(self.players)}, {self.grid}, {self.ledger})"

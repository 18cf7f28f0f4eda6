import sys
from typing import Iterable, Iterator, List, NamedTuple, Optional, TextIO, Tuple
from typeguard import typechecked

from pacgraph.core.console import *
from pacgraph.config.config_loader import ConfigLoader
from pacgraph.agent.player import MoveCommand
from pacgraph.game.game_context import GameContext, PacObservation


class ProtocolError(Exception):
    """Raised when an input line does not match the turn protocol."""

    pass


class PelletObservation(NamedTuple):
    x: int
    y: int
    value: int


class TurnInput(NamedTuple):
    my_score: int
    opponent_score: int
    pacs: List[PacObservation]
    pellets: List[PelletObservation]


def _next_line(lines: Iterator[str], what: str) -> str:
    try:
        return next(lines).rstrip("\r\n")
    except StopIteration:
        raise ProtocolError(f"Input ended while reading {what}")


def _ints(line: str, count: int, what: str) -> List[int]:
    parts = line.split()
    if len(parts) < count:
        raise ProtocolError(f"Expected {count} integers for {what}, got '{line}'")
    try:
        return [int(part) for part in parts[:count]]
    except ValueError:
        raise ProtocolError(f"Non-integer value in {what}: '{line}'")


@typechecked
def read_header(lines: Iterator[str]) -> Tuple[int, int, List[str]]:
    """Read 'width height' followed by height grid rows."""
    width, height = _ints(_next_line(lines, "grid size"), 2, "grid size")
    rows = [_next_line(lines, f"grid row {i}") for i in range(height)]
    for i, row in enumerate(rows):
        if len(row) != width:
            raise ProtocolError(f"Grid row {i} has length {len(row)}, expected {width}")
    return width, height, rows


def parse_pac(line: str) -> PacObservation:
    """Parse 'pacId mine x y [typeId speedTurnsLeft abilityCooldown]'."""
    parts = line.split()
    pac_id, mine, x, y = _ints(line, 4, "pac")
    type_id = parts[4] if len(parts) > 4 else ""
    extras = _ints(" ".join(parts[5:7]), 2, "pac abilities") if len(parts) >= 7 else [0, 0]
    return PacObservation(pac_id, mine != 0, x, y, type_id, extras[0], extras[1])


def parse_pellet(line: str) -> PelletObservation:
    x, y, value = _ints(line, 3, "pellet")
    return PelletObservation(x, y, value)


@typechecked
def read_turn(lines: Iterator[str]) -> Optional[TurnInput]:
    """Read one turn; None when the input is exhausted before the turn starts."""
    try:
        first = next(lines).rstrip("\r\n")
    except StopIteration:
        return None
    if not first.strip():
        raise ProtocolError("Blank line where the score line was expected")

    my_score, opponent_score = _ints(first, 2, "scores")
    pac_count = _ints(_next_line(lines, "pac count"), 1, "pac count")[0]
    pacs = [parse_pac(_next_line(lines, "pac")) for _ in range(pac_count)]
    pellet_count = _ints(_next_line(lines, "pellet count"), 1, "pellet count")[0]
    pellets = [parse_pellet(_next_line(lines, "pellet")) for _ in range(pellet_count)]
    return TurnInput(my_score, opponent_score, pacs, pellets)


@typechecked
def format_commands(commands: Iterable[MoveCommand]) -> str:
    return " | ".join(str(command) for command in commands)


@typechecked
def run(stream_in: TextIO, stream_out: TextIO, config: Optional[ConfigLoader] = None) -> GameContext:
    """
    Play until the input ends: build the context from the header, then answer
    every turn with one line of commands.
    """
    config = config if config is not None else ConfigLoader()
    lines = iter(stream_in)

    width, height, rows = read_header(lines)
    context = GameContext.from_rows(rows, config)
    info(f"Playing on {width}x{height}: {context.grid}")

    while True:
        turn = read_turn(lines)
        if turn is None:
            break
        commands = context.process_turn(turn.pacs)
        print(format_commands(commands), file=stream_out, flush=True)

    context.finish()
    success(f"Input exhausted after {context.turn} turns")
    return context


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point. An optional first argument names a YAML config file."""
    argv = sys.argv[1:] if argv is None else argv
    config = ConfigLoader(argv[0] if argv else None)
    config.apply_log_level()
    run(sys.stdin, sys.stdout, config)
    return 0

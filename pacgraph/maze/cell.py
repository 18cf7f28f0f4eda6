from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Tuple
from typeguard import typechecked

EMPTY_FLOOR = " "


class PathRecord(NamedTuple):
    """One corridor walk that ended on a Node: where it started, its length and every cell on it."""

    source: "Node"
    steps: int
    cells: Tuple[int, ...]


def walk_corridors(grid: Any, origin: "Cell", is_terminal: Callable[["Cell"], bool]) -> Iterator[Tuple["Cell", Tuple[int, ...], bool]]:
    """
    Depth-first walk outward from origin along corridor cells.

    Every frame carries its own frozen visited set and route, so branches never
    share state. Yields (cell, route, terminal) for each cell reached, where
    route starts at origin and ends at cell. Branches stop at terminal cells.
    """
    stack: List[Tuple[Cell, frozenset, Tuple[int, ...]]] = []
    for neighbor in reversed(grid.get_adjacent(origin.x, origin.y)):
        if neighbor.id == origin.id:
            continue
        stack.append((neighbor, frozenset((origin.id, neighbor.id)), (origin.id, neighbor.id)))

    while stack:
        cell, visited, route = stack.pop()
        terminal = is_terminal(cell)
        yield cell, route, terminal
        if terminal:
            continue
        for neighbor in reversed(grid.get_adjacent(cell.x, cell.y)):
            if neighbor.id in visited:
                continue
            stack.append((neighbor, visited | {neighbor.id}, route + (neighbor.id,)))


@typechecked
class Cell:
    """A traversable grid position."""

    def __init__(self, grid: Any, x: int, y: int, value: str = EMPTY_FLOOR):
        self.grid = grid
        self.id: int = grid.to_id(x, y)
        self.x = x
        self.y = y
        self.value = value
        self.one_way = False
        # Node id -> steps from that node, for every compression walk passing here
        self.connected: Dict[int, int] = {}

    @property
    def is_node(self) -> bool:
        return False

    @property
    def coords(self) -> Tuple[int, int]:
        return self.x, self.y

    def record_origin(self, node_id: int, steps: int) -> None:
        """Remember that node_id reaches this cell in steps, keeping the shortest."""
        known = self.connected.get(node_id)
        if known is None or steps < known:
            self.connected[node_id] = steps

    def clear_value(self) -> None:
        self.value = EMPTY_FLOOR

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, x={self.x}, y={self.y})"

    def __str__(self) -> str:
        return f"[Type: {type(self).__name__.lower()}] {self.id} ({self.x}, {self.y})"


@typechecked
class Node(Cell):
    """
    A junction or dead end: a Cell whose neighbor count is not 2.

    connected maps every directly reachable Node id to its weight in moves,
    routes holds the matching cell ids (this node excluded, target included),
    paths collects one PathRecord per walk of another Node that ended here.
    """

    def __init__(self, grid: Any, x: int, y: int, value: str = EMPTY_FLOOR):
        super().__init__(grid, x, y, value)
        self.routes: Dict[int, Tuple[int, ...]] = {}
        self.paths: List[PathRecord] = []

    @property
    def is_node(self) -> bool:
        return True

    @classmethod
    def from_cell(cls, cell: Cell) -> "Node":
        node = cls(cell.grid, cell.x, cell.y, cell.value)
        node.one_way = cell.one_way
        return node

    def connect(self) -> int:
        """
        Discover every Node reachable from this one without crossing a third Node.

        Reached cells learn this node's id and distance; reached Nodes also get
        the edge back to this node. Returns the number of walks that ended on a Node.
        """
        reached = 0
        for cell, route, terminal in walk_corridors(self.grid, self, lambda c: c.is_node):
            steps = len(route) - 1
            if terminal:
                cell.link(self, steps, route)
                reached += 1
            else:
                cell.record_origin(self.id, steps)
        return reached

    def link(self, source: "Node", steps: int, route: Tuple[int, ...]) -> None:
        """Record that source's walk ended here after steps along route."""
        known = self.connected.get(source.id)
        if known is None or steps < known:
            self.connected[source.id] = steps
            # route runs source -> self; stored reversed, self excluded
            self.routes[source.id] = tuple(reversed(route[:-1]))
        self.paths.append(PathRecord(source, steps, route))

    def has_cell(self, cell_id: int) -> bool:
        """True if any recorded walk ending here passed through cell_id."""
        return any(cell_id in record.cells for record in self.paths)

from typing import Dict, Iterable, List, Optional, Tuple
from typeguard import typechecked

from pacgraph.core.console import *
from pacgraph.maze.cell import Cell, Node
from pacgraph.maze.pathfinding import shortest_path

DEFAULT_WALL = "#"


class GridError(Exception):
    """Base exception for grid construction and query errors."""

    pass


class MalformedGridError(GridError):
    """Raised when rows do not describe a rectangular grid."""

    pass


class CoordinateError(GridError):
    """Raised when a coordinate or cell id lies outside the grid."""

    pass


@typechecked
class Grid:
    """
    Toroidal maze: rows wrap horizontally, never vertically.

    Owns every Cell by id and the subset promoted to Node. Cells are built by
    load_row(), then establish() classifies and compresses them. After that the
    graph is read-only; only floor values change.
    """

    def __init__(self, wall_char: str = DEFAULT_WALL):
        self.width: Optional[int] = None
        self.height: int = 0
        self.wall_char = wall_char
        self.cells: Dict[int, Cell] = {}
        self.nodes: Dict[int, Node] = {}
        self.established = False

    @classmethod
    def from_rows(cls, rows: Iterable[str], wall_char: str = DEFAULT_WALL) -> "Grid":
        """Build and establish a grid from its text rows."""
        grid = cls(wall_char=wall_char)
        for index, row in enumerate(rows):
            grid.load_row(row, index)
        grid.establish()
        return grid

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def load_row(self, row: str, row_index: int) -> None:
        """
        Append one row. Every non-wall character becomes a Cell at (column, row_index).

        Raises:
            GridError: If the grid is already established.
            MalformedGridError: If the row length differs from the established width
                or row_index does not match the next row.
        """
        if self.established:
            raise MalformedGridError("Cannot load rows after establish()")
        if row_index != self.height:
            raise MalformedGridError(f"Expected row {self.height}, got row {row_index}")

        self.height += 1
        if not row:
            debug(f"Row {row_index} is empty")
            return

        if self.width is None:
            self.width = len(row)
        elif len(row) != self.width:
            raise MalformedGridError(f"Row {row_index} has length {len(row)}, expected {self.width}")

        for column, char in enumerate(row):
            if char == self.wall_char:
                continue
            cell = Cell(self, column, row_index, char)
            self.cells[cell.id] = cell

    def establish(self) -> None:
        """Promote every cell whose neighbor count is not 2 to a Node, then compress corridors."""
        if self.established:
            warning("Grid already established, skipping")
            return

        with timed_block("Graph compression", LogLevel.DEBUG):
            for cell_id, cell in list(self.cells.items()):
                degree = len(self.get_adjacent(cell.x, cell.y))
                if degree == 2:
                    continue
                cell.one_way = degree == 1
                node = Node.from_cell(cell)
                self.cells[cell_id] = node
                self.nodes[cell_id] = node

            walks = 0
            for node in self.nodes.values():
                walks += node.connect()

        self.established = True
        if not self.cells:
            warning("Grid has no traversable cells")
        isolated = sum(1 for node in self.nodes.values() if not node.connected)
        if isolated:
            debug(f"{isolated} isolated node(s) without edges")
        info(f"Established grid {self.width}x{self.height}: {len(self.cells)} cells, {len(self.nodes)} nodes, {walks} corridor walks")

    # ------------------------------------------------------------------
    # Coordinates
    # ------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return self.width is not None and 0 <= x < self.width and 0 <= y < self.height

    def to_id(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise CoordinateError(f"Coordinate ({x}, {y}) outside grid {self.width}x{self.height}")
        return x + y * self.width

    def to_coords(self, cell_id: int) -> Tuple[int, int]:
        if self.width is None or not 0 <= cell_id < self.width * self.height:
            raise CoordinateError(f"Cell id {cell_id} outside grid {self.width}x{self.height}")
        return cell_id % self.width, cell_id // self.width

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """Return the Cell at (x, y), or None for a wall."""
        return self.cells.get(self.to_id(x, y))

    def is_node(self, x: int, y: int) -> bool:
        return self.to_id(x, y) in self.nodes

    def get_adjacent(self, x: int, y: int) -> List[Cell]:
        """
        Return the existing neighbors of (x, y) in left, right, top, bottom order.
        Left and right wrap around the grid width; top and bottom do not.
        A neighbor reached twice through the wrap (width <= 2) is listed once.
        """
        own = self.to_id(x, y)
        adjacent = []

        left = self.to_id(x - 1 if x else self.width - 1, y)
        right = self.to_id(x + 1 if x < self.width - 1 else 0, y)
        candidates = [left, right]
        if y > 0:
            candidates.append(self.to_id(x, y - 1))
        if y < self.height - 1:
            candidates.append(self.to_id(x, y + 1))

        seen = {own}
        for cell_id in candidates:
            cell = self.cells.get(cell_id)
            if cell is not None and cell_id not in seen:
                seen.add(cell_id)
                adjacent.append(cell)
        return adjacent

    def connected_nodes(self, x: int, y: int) -> Dict[int, Node]:
        """Return every Node that has a recorded corridor walk passing through (x, y)."""
        location = self.to_id(x, y)
        return {node_id: node for node_id, node in self.nodes.items() if node.has_cell(location)}

    def neighbor_nodes(self, cell_id: int) -> Dict[int, int]:
        """
        Node id -> step count candidates around a cell: a Node's edges, or for a
        corridor cell the Nodes whose walks reached it.
        """
        cell = self.cells.get(cell_id)
        if cell is None:
            return {}
        return dict(cell.connected)

    def shortest_path(self, x1: int, y1: int, x2: int, y2: int, stale_policy: str = "skip") -> List[int]:
        """Cell ids from (x1, y1) to (x2, y2) inclusive; empty when unreachable."""
        return shortest_path(self, x1, y1, x2, y2, stale_policy=stale_policy)

    def __contains__(self, cell_id: int) -> bool:
        return cell_id in self.cells

    def __len__(self) -> int:
        return len(self.cells)

    def __str__(self) -> str:
        status = "established" if self.established else "loading"
        return f"Grid({self.width}x{self.height}, cells={len(self.cells)}, nodes={len(self.nodes)}, {status})"

import heapq
from typing import Any, Dict, List, Optional, Tuple
from typeguard import typechecked

from pacgraph.core.console import *
from pacgraph.maze.cell import walk_corridors

# node id -> neighbor id -> (weight, route); a route lists the cells after the
# source up to and including the neighbor
EdgeMap = Dict[int, Dict[int, Tuple[int, Tuple[int, ...]]]]

STALE_SKIP = "skip"
STALE_ABORT = "abort"


def _add_edge(adjacency: Dict[int, Tuple[int, Tuple[int, ...]]], target: int, weight: int, route: Tuple[int, ...]) -> None:
    known = adjacency.get(target)
    if known is None or weight < known[0]:
        adjacency[target] = (weight, route)


@typechecked
def build_local_edges(grid: Any, start_id: int, end_id: Optional[int] = None) -> EdgeMap:
    """
    Copy the compressed graph and splice in non-node endpoints as pseudo-nodes.

    A pseudo-node gets its edges from a corridor walk that stops at Nodes and at
    the other pseudo endpoint. The reached Nodes get the reverse edge in the copy
    only; the grid is left untouched.
    """
    edges: EdgeMap = {node_id: {neighbor: (weight, node.routes[neighbor]) for neighbor, weight in node.connected.items()} for node_id, node in grid.nodes.items()}

    pseudo = [cell_id for cell_id in dict.fromkeys((start_id, end_id)) if cell_id is not None and cell_id not in grid.nodes]
    pseudo_ids = set(pseudo)

    for cell_id in pseudo:
        cell = grid.cells[cell_id]
        own = edges.setdefault(cell_id, {})
        for reached, route, terminal in walk_corridors(grid, cell, lambda c: c.is_node or c.id in pseudo_ids):
            if not terminal:
                continue
            steps = len(route) - 1
            _add_edge(own, reached.id, steps, route[1:])
            _add_edge(edges.setdefault(reached.id, {}), cell_id, steps, tuple(reversed(route[:-1])))
        debug(f"Pseudo-node {cell_id} spliced in with {len(own)} edge(s)")

    return edges


@typechecked
def dijkstra(grid: Any, start_id: int, end_id: Optional[int] = None, stale_policy: str = STALE_SKIP) -> Tuple[Dict[int, int], Dict[int, int], EdgeMap]:
    """
    Label-setting shortest path search over the compressed graph.

    Parameters:
        grid: Established Grid.
        start_id (int): Cell id of the origin; non-node cells become pseudo-nodes.
        end_id (Optional[int]): Cell id of the destination. When given, it is also
            spliced in as a pseudo-node and the search stops once it is settled.
        stale_policy (str): "skip" ignores a popped entry whose priority is worse than
            the best known distance; "abort" ends the whole search at that point.

    Returns:
        (distance, predecessors, edges): tentative distances from start_id, the
        predecessor of each reached id and the edge map the search ran on.
    """
    if stale_policy not in (STALE_SKIP, STALE_ABORT):
        raise ValueError(f"Unknown stale_policy '{stale_policy}', expected '{STALE_SKIP}' or '{STALE_ABORT}'")

    edges = build_local_edges(grid, start_id, end_id)

    distance: Dict[int, int] = {start_id: 0}
    predecessors: Dict[int, int] = {}
    visited = set()
    queue: List[Tuple[int, int]] = [(0, start_id)]

    while queue:
        priority, current = heapq.heappop(queue)
        if distance[current] < priority:
            if stale_policy == STALE_ABORT:
                debug(f"Stale entry for {current} ({priority} > {distance[current]}), aborting search")
                break
            continue
        if current in visited:
            continue
        visited.add(current)
        if current == end_id:
            break

        for neighbor, (weight, _) in edges.get(current, {}).items():
            if neighbor in visited:
                continue
            cost = priority + weight
            if neighbor not in distance or cost < distance[neighbor]:
                distance[neighbor] = cost
                predecessors[neighbor] = current
                heapq.heappush(queue, (cost, neighbor))

    return distance, predecessors, edges


def reconstruct_path(start_id: int, end_id: int, predecessors: Dict[int, int], edges: EdgeMap) -> List[int]:
    """Walk predecessors back from end_id and expand every hop into its corridor cells."""
    hops = [end_id]
    at = end_id
    while at != start_id:
        at = predecessors[at]
        hops.append(at)
    hops.reverse()

    path = [start_id]
    for source, target in zip(hops, hops[1:]):
        path.extend(edges[source][target][1])
    return path


@typechecked
def shortest_path(grid: Any, x1: int, y1: int, x2: int, y2: int, stale_policy: str = STALE_SKIP) -> List[int]:
    """
    Shortest path between two cells as cell ids, start and end inclusive.

    Consecutive ids are grid neighbors. Returns an empty list when either
    endpoint is a wall or the cells are in different components.

    Raises:
        CoordinateError: If a coordinate lies outside the grid.
    """
    start_id = grid.to_id(x1, y1)
    end_id = grid.to_id(x2, y2)

    if start_id not in grid.cells or end_id not in grid.cells:
        debug(f"No path between ({x1}, {y1}) and ({x2}, {y2}): endpoint is a wall")
        return []
    if start_id == end_id:
        return [start_id]

    distance, predecessors, edges = dijkstra(grid, start_id, end_id, stale_policy=stale_policy)
    if end_id not in distance:
        debug(f"No path between ({x1}, {y1}) and ({x2}, {y2}): unreachable")
        return []

    return reconstruct_path(start_id, end_id, predecessors, edges)

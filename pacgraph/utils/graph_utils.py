import networkx as nx
from typeguard import typechecked
from typing import Any, Dict, List, Tuple

from pacgraph.core.console import *


@typechecked
def to_networkx(grid: Any) -> nx.Graph:
    """
    Export the compressed junction graph.

    Nodes carry 'x', 'y' and 'one_way'; edges carry 'weight' (moves between the nodes)
    and 'route' (cell ids from the lower to the higher node id, both excluded).
    """
    G = nx.Graph()
    for node_id, node in grid.nodes.items():
        G.add_node(node_id, x=node.x, y=node.y, one_way=node.one_way)

    for node_id, node in grid.nodes.items():
        for neighbor, weight in node.connected.items():
            if G.has_edge(node_id, neighbor) and G[node_id][neighbor]["weight"] <= weight:
                continue
            route = node.routes[neighbor][:-1]
            if node_id > neighbor:
                route = tuple(reversed(route))
            G.add_edge(node_id, neighbor, weight=weight, route=route)

    debug(f"Exported compressed graph with {G.number_of_nodes()} nodes and {G.number_of_edges()} edges")
    return G


@typechecked
def cell_graph(grid: Any) -> nx.Graph:
    """Uncompressed graph: one node per cell, one unit edge per adjacency (with horizontal wrap)."""
    G = nx.Graph()
    for cell_id, cell in grid.cells.items():
        G.add_node(cell_id, x=cell.x, y=cell.y)
    for cell_id, cell in grid.cells.items():
        for neighbor in grid.get_adjacent(cell.x, cell.y):
            G.add_edge(cell_id, neighbor.id, weight=1)
    return G


@typechecked
def asymmetric_edges(grid: Any) -> List[Tuple[int, int]]:
    """Edges (a, b) where a lists b but b does not list a, or lists it with another weight."""
    found = []
    for node_id, node in grid.nodes.items():
        for neighbor, weight in node.connected.items():
            other = grid.nodes[neighbor].connected.get(node_id)
            if other != weight:
                found.append((node_id, neighbor))
    return found


@typechecked
def compression_summary(grid: Any) -> Dict[str, int]:
    """Counts describing how far the corridors were compressed."""
    compressed = to_networkx(grid)
    summary = {
        "cells": len(grid.cells),
        "nodes": len(grid.nodes),
        "edges": compressed.number_of_edges(),
        "dead_ends": sum(1 for node in grid.nodes.values() if node.one_way),
        "isolated": sum(1 for node in grid.nodes.values() if not node.connected),
        "components": nx.number_connected_components(compressed) if compressed.number_of_nodes() else 0,
    }

    asymmetric = asymmetric_edges(grid)
    if asymmetric:
        warning(f"{len(asymmetric)} asymmetric edge(s) in compressed graph, first: {asymmetric[0]}")
    return summary

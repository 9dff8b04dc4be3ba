from collections import deque
from typing import Dict, Iterable, List, Optional, Set

from .grid import MazeGrid, Point


def reachable(grid: MazeGrid, start: Point, ignore: Iterable[Point] = ()) -> Set[Point]:
    """Return the set of path cells 4-connected to ``start``.

    Cells listed in ``ignore`` are treated as walls.
    """
    blocked = set(ignore)
    if not grid.is_path(*start) or start in blocked:
        return set()
    seen = {start}
    q = deque([start])
    while q:
        x, y = q.popleft()
        for n in grid.path_neighbors(x, y):
            if n not in seen and n not in blocked:
                seen.add(n)
                q.append(n)
    return seen


def shortest_path(grid: MazeGrid, start: Point, goal: Point) -> Optional[List[Point]]:
    """Breadth-first search over path cells; returns the cell list or None.

    The returned list includes both ``start`` and ``goal``.
    """
    if not grid.is_path(*start) or not grid.is_path(*goal):
        return None
    parents: Dict[Point, Optional[Point]] = {start: None}
    q = deque([start])
    while q:
        cur = q.popleft()
        if cur == goal:
            break
        for n in grid.path_neighbors(*cur):
            if n not in parents:
                parents[n] = cur
                q.append(n)
    if goal not in parents:
        return None
    path: List[Point] = []
    node: Optional[Point] = goal
    while node is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    return path


def edge_count(grid: MazeGrid, ignore: Iterable[Point] = ()) -> int:
    """Number of orthogonal adjacencies between path cells."""
    blocked = set(ignore)
    edges = 0
    for x, y in grid.path_cells():
        if (x, y) in blocked:
            continue
        for nx, ny in ((x + 1, y), (x, y + 1)):
            if grid.is_path(nx, ny) and (nx, ny) not in blocked:
                edges += 1
    return edges


def is_perfect(grid: MazeGrid, ignore: Iterable[Point] = ()) -> bool:
    """True if the path cells form a spanning tree (connected, acyclic).

    A connected graph with V vertices is a tree iff it has V - 1 edges.
    """
    blocked = set(ignore)
    cells = [c for c in grid.path_cells() if c not in blocked]
    if not cells:
        return False
    component = reachable(grid, cells[0], blocked)
    if len(component) != len(cells):
        return False
    return edge_count(grid, blocked) == len(cells) - 1



def exit_reachable(grid: MazeGrid) -> bool:
    """Whether the exit opening connects to the carved tree."""
    return grid.exit in reachable(grid, grid.start)

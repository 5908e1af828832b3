"""
Ownership-Aware Path Engine

Shortest path over the route graph where the cost of a route depends on who
owns it:
- our routes cost 0 (already paid for, free to reuse)
- opponent routes are not traversable
- unclaimed routes cost their length

So the "distance" is the number of extra wagons needed to connect two cities,
not a geometric distance. Dijkstra with the plain O(V^2) array scan, which is
plenty at board-game map sizes.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .models import GameState, Owner

logger = logging.getLogger(__name__)


@dataclass
class PathResult:
    """A reachable path: extra wagon cost plus the cities and routes walked"""
    cost: int
    cities: List[int]
    route_indices: List[int] = field(default_factory=list)  # route used per step

    @property
    def hops(self) -> int:
        return len(self.cities) - 1

    def edges(self) -> List[Tuple[int, int]]:
        """Consecutive (city_a, city_b) pairs along the path"""
        return list(zip(self.cities, self.cities[1:]))


def _edge_cost(owner: Owner, length: int) -> Optional[int]:
    """Cost of traversing a route, None when it cannot be traversed"""
    if owner == Owner.OPPONENT:
        return None
    if owner == Owner.SELF:
        return 0
    return length


def shortest_path(state: GameState, start: int, end: int) -> Optional[PathResult]:
    """
    Cheapest additional-wagon path from start to end.

    Returns:
        PathResult, or None when either city is out of range or every path
        runs through opponent routes.
    """
    if state is None or not state.is_valid_city(start) or not state.is_valid_city(end):
        logger.debug(f"🧭 Invalid path query {start}->{end}")
        return None

    n = state.nb_cities

    # Adjacency in route-list order so relaxation order is deterministic
    adjacency: List[List[Tuple[int, int, int]]] = [[] for _ in range(n)]
    for idx, route in enumerate(state.routes):
        cost = _edge_cost(route.owner, route.length)
        if cost is None:
            continue
        a, b = route.from_city, route.to_city
        if not (state.is_valid_city(a) and state.is_valid_city(b)):
            continue
        adjacency[a].append((b, cost, idx))
        if b != a:
            adjacency[b].append((a, cost, idx))

    # Larger than any real path cost
    unreached = sum(max(route.length, 0) for route in state.routes) + 1

    dist = np.full(n, unreached, dtype=np.int64)
    prev = np.full(n, -1, dtype=np.int64)
    prev_route = np.full(n, -1, dtype=np.int64)
    visited = np.zeros(n, dtype=bool)
    dist[start] = 0

    for _ in range(n):
        candidates = np.where(visited, unreached, dist)
        u = int(np.argmin(candidates))  # first minimum wins
        if candidates[u] >= unreached:
            break
        visited[u] = True
        if u == end:
            break

        for v, cost, idx in adjacency[u]:
            new_dist = dist[u] + cost
            if new_dist < dist[v]:
                dist[v] = new_dist
                prev[v] = u
                prev_route[v] = idx

    if start != end and prev[end] == -1:
        return None

    cities = [end]
    routes: List[int] = []
    current = end
    while current != start:
        routes.append(int(prev_route[current]))
        current = int(prev[current])
        cities.append(current)
    cities.reverse()
    routes.reverse()

    return PathResult(cost=int(dist[end]), cities=cities, route_indices=routes)

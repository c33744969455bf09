"""
Closed visiting orders (tours) for each cluster of parks.

Two solvers are available: a nearest-insertion heuristic (default, no
optimality guarantee, within 2x of optimal on metric distances) and the
OR-Tools routing solver. Either one must return a permutation of the parks;
anything else is an error, never a silently unordered list.

Tours always start at the first park in name order. A one-park tour has no
segments; a two-park tour goes there and back.
"""

import logging
from dataclasses import dataclass
from typing import Hashable, Iterable, Tuple

import numpy as np
import pandas as pd
from ortools.constraint_solver import pywrapcp, routing_enums_pb2

from .cluster_parks import InsufficientParksError, haversine_matrix
from .config import ORTOOLS_TIME_LIMIT_S, TSP_METHOD

logger = logging.getLogger(__name__)

TSP_METHODS = ("nearest_insertion", "ortools")


class TourSolverError(RuntimeError):
    """The TSP solver produced no usable tour."""


@dataclass(frozen=True)
class Segment:
    """One directed leg of a tour; coordinates are (lon, lat)."""

    from_park: str
    to_park: str
    from_coords: Tuple[float, float]
    to_coords: Tuple[float, float]
    distance_km: float


@dataclass(frozen=True)
class TourOrder:
    cluster_id: Hashable
    parks: Tuple[str, ...]
    segments: Tuple[Segment, ...]
    closed: bool = True
    length_km: float = 0.0


def nearest_insertion(dist, start: int = 0) -> list[int]:
    """Nearest-insertion tour over a square distance matrix.

    Repeatedly take the city closest to any city already in the tour and
    insert it where it adds the least length. Ties go to the lowest index.
    """
    dist = np.asarray(dist, dtype=float)
    n = len(dist)
    if n == 0:
        raise InsufficientParksError("Cannot build a tour over zero parks")
    if not 0 <= start < n:
        raise ValueError(f"start index {start} out of range for {n} parks")

    tour = [start]
    remaining = [i for i in range(n) if i != start]
    nearest = dist[start].copy()  # distance from each city to the tour

    while remaining:
        k = min(remaining, key=lambda i: (nearest[i], i))
        if len(tour) == 1:
            tour.append(k)
        else:
            best_pos, best_cost = 1, np.inf
            for p in range(len(tour)):
                i, j = tour[p], tour[(p + 1) % len(tour)]
                cost = dist[i, k] + dist[k, j] - dist[i, j]
                if cost < best_cost:
                    best_pos, best_cost = p + 1, cost
            tour.insert(best_pos, k)
        remaining.remove(k)
        nearest = np.minimum(nearest, dist[k])

    return tour


def solve_tsp(distance_matrix, start_index: int = 0, time_limit_s: int = ORTOOLS_TIME_LIMIT_S) -> list[int]:
    """Solve TSP using OR-Tools. Returns the visiting order without the closing depot."""
    # OR-Tools requires integers: kilometres -> metres
    matrix = np.rint(np.asarray(distance_matrix, dtype=float) * 1000).astype(int).tolist()
    n = len(matrix)

    # 1 vehicle, depot at start_index
    manager = pywrapcp.RoutingIndexManager(n, 1, start_index)
    routing = pywrapcp.RoutingModel(manager)

    def cost_callback(from_index, to_index):
        f = manager.IndexToNode(from_index)
        t = manager.IndexToNode(to_index)
        return matrix[f][t]

    transit_callback_idx = routing.RegisterTransitCallback(cost_callback)
    routing.SetArcCostEvaluatorOfAllVehicles(transit_callback_idx)

    search_parameters = pywrapcp.DefaultRoutingSearchParameters()
    search_parameters.first_solution_strategy = (
        routing_enums_pb2.FirstSolutionStrategy.PATH_CHEAPEST_ARC
    )
    search_parameters.local_search_metaheuristic = (
        routing_enums_pb2.LocalSearchMetaheuristic.GUIDED_LOCAL_SEARCH
    )
    search_parameters.time_limit.seconds = time_limit_s

    solution = routing.SolveWithParameters(search_parameters)
    if not solution:
        raise TourSolverError("No solution found")

    route = []
    index = routing.Start(0)
    while not routing.IsEnd(index):
        route.append(manager.IndexToNode(index))
        index = solution.Value(routing.NextVar(index))
    return route


def _check_permutation(order: list[int], n: int) -> None:
    if sorted(order) != list(range(n)):
        raise TourSolverError(f"Solver returned {order}, not a permutation of {n} parks")


def tour_length(dist, order: list[int]) -> float:
    """Closed tour length, including the leg back to the start."""
    dist = np.asarray(dist, dtype=float)
    if len(order) < 2:
        return 0.0
    return float(sum(dist[a, b] for a, b in zip(order, order[1:] + order[:1])))


def order_cluster(
    cluster_id,
    parks: pd.DataFrame,
    method: str = TSP_METHOD,
    time_limit_s: int = ORTOOLS_TIME_LIMIT_S,
) -> TourOrder:
    """Closed tour over one cluster of parks (park_name, latitude, longitude)."""
    if method not in TSP_METHODS:
        raise ValueError(f"Unknown TSP method {method!r}; expected one of {TSP_METHODS}")
    if len(parks) == 0:
        raise InsufficientParksError(f"Cluster {cluster_id} has no parks")

    ordered = parks.sort_values("park_name", kind="stable").reset_index(drop=True)
    n = len(ordered)
    dist = haversine_matrix(ordered["latitude"], ordered["longitude"])

    if n == 1:
        order = [0]
    elif method == "ortools":
        order = solve_tsp(dist, 0, time_limit_s=time_limit_s)
    else:
        order = nearest_insertion(dist, 0)
    _check_permutation(order, n)

    names = ordered["park_name"].tolist()
    coords = list(zip(ordered["longitude"].astype(float), ordered["latitude"].astype(float)))

    segments = ()
    if n > 1:
        segments = tuple(
            Segment(
                from_park=names[a],
                to_park=names[b],
                from_coords=coords[a],
                to_coords=coords[b],
                distance_km=float(dist[a, b]),
            )
            for a, b in zip(order, order[1:] + order[:1])
        )

    tour = TourOrder(
        cluster_id=cluster_id,
        parks=tuple(names[i] for i in order),
        segments=segments,
        closed=True,
        length_km=tour_length(dist, order),
    )
    logger.debug("Cluster %s tour: %s (%.1f km)", cluster_id, " -> ".join(tour.parks), tour.length_km)
    return tour


def cluster_groups(clustered: pd.DataFrame, level: str = "cluster") -> list[tuple]:
    """Explicit (cluster_id, parks) inputs for order_clusters.

    At the subcluster level ids are (cluster, subcluster) tuples.
    """
    if level == "cluster":
        keys = "cluster"
    elif level == "subcluster":
        keys = ["cluster", "subcluster"]
    else:
        raise ValueError(f"level must be 'cluster' or 'subcluster', got {level!r}")
    groups = []
    for cid, group in clustered.groupby(keys, sort=True):
        cid = tuple(int(c) for c in cid) if isinstance(cid, tuple) else int(cid)
        groups.append((cid, group))
    return groups


def order_clusters(groups: Iterable[tuple], method: str = TSP_METHOD) -> list[TourOrder]:
    tours = [order_cluster(cid, parks, method=method) for cid, parks in groups]
    logger.info(
        "Ordered %d tours, %.1f km in total",
        len(tours),
        sum(t.length_km for t in tours),
    )
    return tours

"""
Geographic hierarchical clustering of parks.

Parks are grouped by agglomerative clustering on their pairwise distance
matrix and the dendrogram is cut into exactly k flat clusters. The same
procedure run inside each cluster (Ward linkage, about one group per five
parks) gives the subclusters.

Ward, centroid and median linkage are only defined for Euclidean distances,
so with the haversine metric they run on 3-D points on the Earth sphere
instead of the great-circle matrix.

Cut results are made deterministic: parks are ordered by name before the
linkage, and cluster ids are numbered 1..k by first appearance in that
order. Input row order therefore never changes the result.
"""

import logging

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import cut_tree, linkage
from scipy.spatial.distance import pdist, squareform
from sklearn.metrics.pairwise import haversine_distances

from .config import (
    CLUSTER_LINKAGE,
    DISTANCE_METRIC,
    EARTH_RADIUS_KM,
    N_CLUSTERS,
    PARKS_PER_SUBCLUSTER,
    SUBCLUSTER_LINKAGE,
)

logger = logging.getLogger(__name__)

LAT_COL = "latitude"
LON_COL = "longitude"

# Linkages whose update formulas assume Euclidean distances
EUCLIDEAN_LINKAGES = ("ward", "centroid", "median")


class InsufficientParksError(ValueError):
    """Too few parks for the requested clustering or tour."""


def haversine_matrix(lats, lons) -> np.ndarray:
    """N x N great-circle distances in kilometres."""
    coords = np.radians(np.c_[np.asarray(lats, dtype=float), np.asarray(lons, dtype=float)])
    dist = haversine_distances(coords) * EARTH_RADIUS_KM
    # Exact symmetry and zero diagonal for squareform()
    dist = (dist + dist.T) / 2.0
    np.fill_diagonal(dist, 0.0)
    return dist


def distance_matrix(lats, lons, metric: str = DISTANCE_METRIC) -> np.ndarray:
    if metric == "haversine":
        return haversine_matrix(lats, lons)
    if metric == "euclidean":
        # Planar distance on (lon, lat) degrees
        points = np.c_[np.asarray(lons, dtype=float), np.asarray(lats, dtype=float)]
        return squareform(pdist(points, metric="euclidean"))
    raise ValueError(f"Unknown distance metric: {metric!r}")


def sphere_points(lats, lons) -> np.ndarray:
    """N x 3 Cartesian points on a sphere of radius EARTH_RADIUS_KM."""
    lat = np.radians(np.asarray(lats, dtype=float))
    lon = np.radians(np.asarray(lons, dtype=float))
    return EARTH_RADIUS_KM * np.c_[np.cos(lat) * np.cos(lon), np.cos(lat) * np.sin(lon), np.sin(lat)]


def _linkage(lats, lons, method: str, metric: str) -> np.ndarray:
    if method in EUCLIDEAN_LINKAGES and metric == "haversine":
        # Chord distance through the sphere; under 1% shorter than the
        # great-circle distance up to 2000 km
        return linkage(sphere_points(lats, lons), method=method, metric="euclidean")
    dist = distance_matrix(lats, lons, metric=metric)
    return linkage(squareform(dist, checks=False), method=method)


def _name_order(parks: pd.DataFrame) -> np.ndarray:
    return np.argsort(parks["park_name"].to_numpy(dtype=str), kind="stable")


def assign_clusters(
    parks: pd.DataFrame,
    k: int = N_CLUSTERS,
    method: str = CLUSTER_LINKAGE,
    metric: str = DISTANCE_METRIC,
) -> pd.Series:
    """Return a cluster id in 1..k for every row of parks (same index)."""
    n = len(parks)
    if n == 0:
        raise InsufficientParksError("Cannot cluster an empty set of parks")
    if k < 1:
        raise InsufficientParksError(f"Number of clusters must be >= 1, got {k}")
    if k > n:
        raise InsufficientParksError(f"Cannot cut {n} parks into {k} clusters")

    if k == 1:
        return pd.Series(np.ones(n, dtype=int), index=parks.index, name="cluster")

    order = _name_order(parks)
    ordered = parks.iloc[order]
    Z = _linkage(ordered[LAT_COL], ordered[LON_COL], method, metric)
    raw = cut_tree(Z, n_clusters=k).ravel()

    # Renumber by first appearance in name order
    ordered_labels = pd.factorize(raw)[0] + 1

    labels = np.empty(n, dtype=int)
    labels[order] = ordered_labels
    return pd.Series(labels, index=parks.index, name="cluster")


def _split_group(group: pd.DataFrame, per_cluster: int, method: str, metric: str) -> pd.Series:
    n_sub = max(len(group) // per_cluster, 1)
    if n_sub == 1:
        # Singletons and small groups pass through untouched
        return pd.Series(np.ones(len(group), dtype=int), index=group.index, name="subcluster")
    return assign_clusters(group, n_sub, method=method, metric=metric).rename("subcluster")


def assign_subclusters(
    parks: pd.DataFrame,
    clusters: pd.Series,
    per_cluster: int = PARKS_PER_SUBCLUSTER,
    method: str = SUBCLUSTER_LINKAGE,
    metric: str = DISTANCE_METRIC,
) -> pd.Series:
    """Cluster again inside each cluster, max(size // per_cluster, 1) groups each."""
    if per_cluster < 1:
        raise ValueError(f"per_cluster must be >= 1, got {per_cluster}")

    frame = parks.reset_index(drop=True)
    cluster_ids = pd.Series(np.asarray(clusters), name="cluster")
    parts = [
        _split_group(frame[cluster_ids == cid], per_cluster, method, metric)
        for cid in sorted(cluster_ids.unique())
    ]
    labels = pd.concat(parts).sort_index().to_numpy()
    return pd.Series(labels, index=parks.index, name="subcluster")


def cluster_parks(
    parks: pd.DataFrame,
    k: int = N_CLUSTERS,
    subcluster: bool = True,
    per_cluster: int = PARKS_PER_SUBCLUSTER,
    metric: str = DISTANCE_METRIC,
) -> pd.DataFrame:
    """Copy of parks with `cluster` (and `subcluster`) columns added."""
    for col in ("park_name", LAT_COL, LON_COL):
        if col not in parks.columns:
            raise ValueError(f"Missing required column: {col}")

    out = parks.copy()
    out["cluster"] = assign_clusters(parks, k, metric=metric).to_numpy()
    if subcluster:
        out["subcluster"] = assign_subclusters(
            parks, out["cluster"], per_cluster, metric=metric
        ).to_numpy()
    else:
        out["subcluster"] = 1

    sizes = out.groupby("cluster").size().to_dict()
    logger.info("Clustered %d parks into %d clusters: %s", len(out), k, sizes)
    return out

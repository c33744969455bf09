"""Cluster U.S. National Parks by location and order a visiting tour per cluster."""

from .aggregate import (
    park_totals,
    top_parks,
    visitors_by_region,
    visitors_by_region_year,
    visitors_by_state,
    visitors_by_year,
)
from .cluster_parks import InsufficientParksError, assign_clusters, assign_subclusters, cluster_parks
from .geo_join import join_locations, unmatched_parks
from .load_visits import VisitLoad, filter_unit_type, load_park_locations, load_visits
from .osrm_routes import (
    OSRMProvider,
    RouteUnavailableError,
    SegmentRoute,
    StraightLineProvider,
    resolve_tour,
    resolve_tours,
)
from .pipeline import PipelineResult, run_pipeline, tours_frame
from .route_optimize import (
    Segment,
    TourOrder,
    TourSolverError,
    cluster_groups,
    nearest_insertion,
    order_cluster,
    order_clusters,
    solve_tsp,
)

__version__ = "0.1.0"

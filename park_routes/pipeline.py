"""
Cluster the most visited parks and propose a visiting order for each cluster.

Usage examples:
- Tours over the 50 most visited National Parks, written to park_tours.csv:
    python -m park_routes --visits data/national_parks_visits.csv --locations data/parks.csv

- Subcluster tours, rendered on a map with real road geometry from OSRM:
    python -m park_routes --level subcluster --map park_tours.html --osrm
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from . import config
from .aggregate import park_totals, top_parks
from .cluster_parks import cluster_parks
from .geo_join import join_locations
from .load_visits import filter_unit_type, load_park_locations, load_visits
from .osrm_routes import OSRMProvider, StraightLineProvider, resolve_tours
from .route_map import build_route_map, save_route_map
from .route_optimize import TSP_METHODS, TourOrder, cluster_groups, order_clusters

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    records: pd.DataFrame
    totals: pd.DataFrame
    joined: pd.DataFrame
    clustered: pd.DataFrame
    tours: List[TourOrder]


def run_pipeline(
    visits_path: str = config.VISITS_CSV,
    locations_path: str = config.LOCATIONS_CSV,
    n_clusters: int = config.N_CLUSTERS,
    top_n: int = config.TOP_N_PARKS,
    unit_type: Optional[str] = config.UNIT_TYPE,
    subcluster: bool = True,
    level: str = "cluster",
    tsp_method: str = config.TSP_METHOD,
    locations_sep: str = config.LOCATIONS_SEP,
) -> PipelineResult:
    """Load, aggregate, join, cluster and order. No network access."""
    if level == "subcluster" and not subcluster:
        raise ValueError("level='subcluster' needs subcluster=True")

    load = load_visits(visits_path)
    records = filter_unit_type(load.records, unit_type)
    totals = park_totals(records)

    locations = load_park_locations(locations_path, sep=locations_sep)
    # Join first so parks without coordinates do not use up top-N slots
    joined = join_locations(totals, locations)
    if len(joined):
        joined = top_parks(joined, top_n)

    clustered = cluster_parks(joined, k=n_clusters, subcluster=subcluster)
    tours = order_clusters(cluster_groups(clustered, level=level), method=tsp_method)
    return PipelineResult(records, totals, joined, clustered, tours)


def tours_frame(tours: List[TourOrder], clustered: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    """One row per stop; the closing leg back to stop 1 is implied.

    Coordinates come from `clustered` when given, otherwise from the tour
    segments. A park with no known coordinates (a one-park tour without
    `clustered`) gets NaN.
    """
    if clustered is not None:
        coords = {
            name: (lat, lon)
            for name, lat, lon in clustered[["park_name", "latitude", "longitude"]].itertuples(index=False)
        }
    else:
        # Segment coordinates are (lon, lat)
        coords = {seg.from_park: seg.from_coords[::-1] for t in tours for seg in t.segments}

    rows = []
    for t in tours:
        for i, park in enumerate(t.parks, start=1):
            lat, lon = coords.get(park, (np.nan, np.nan))
            rows.append(
                {"cluster_id": str(t.cluster_id), "stop": i, "park_name": park, "latitude": lat, "longitude": lon}
            )
    return pd.DataFrame(rows, columns=["cluster_id", "stop", "park_name", "latitude", "longitude"])


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cluster the most visited National Parks and order a visiting tour per cluster"
    )
    parser.add_argument(
        "--visits",
        default=config.VISITS_CSV,
        help=f"Visitation CSV (Region, State, Unit.Name, YearRaw, Visitors). Default: {config.VISITS_CSV}",
    )
    parser.add_argument(
        "--locations",
        default=config.LOCATIONS_CSV,
        help=f"Coordinate lookup (Park Name, Latitude, Longitude). Default: {config.LOCATIONS_CSV}",
    )
    parser.add_argument("--sep", default=config.LOCATIONS_SEP, help="Delimiter of the coordinate lookup")
    parser.add_argument("--clusters", type=int, default=config.N_CLUSTERS, help="Number of clusters")
    parser.add_argument("--top", type=int, default=config.TOP_N_PARKS, help="How many top parks to route")
    parser.add_argument(
        "--unit-type",
        default=config.UNIT_TYPE,
        help="Keep only this NPS unit type; pass an empty string to keep all",
    )
    parser.add_argument("--no-subclusters", action="store_true", help="Skip the subclustering pass")
    parser.add_argument(
        "--level",
        choices=["cluster", "subcluster"],
        default="cluster",
        help="Build one tour per cluster or per subcluster",
    )
    parser.add_argument("--tsp", choices=TSP_METHODS, default=config.TSP_METHOD, help="TSP solver")
    parser.add_argument("--out", default=config.OUTPUT_TOURS_CSV, help="Output tours CSV path")
    parser.add_argument("--map", default=None, help="Also write an HTML route map to this path")
    parser.add_argument("--osrm", action="store_true", help="Draw road geometry from OSRM on the map")
    parser.add_argument("--osrm-url", default=config.OSRM_BASE, help="OSRM server base URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("Loading, clustering and ordering parks...")
    try:
        result = run_pipeline(
            visits_path=args.visits,
            locations_path=args.locations,
            n_clusters=args.clusters,
            top_n=args.top,
            unit_type=args.unit_type or None,
            subcluster=not args.no_subclusters,
            level=args.level,
            tsp_method=args.tsp,
            locations_sep=args.sep,
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Routed {len(result.clustered)} parks in {len(result.tours)} tours")
    for tour in result.tours:
        print(f"  {tour.cluster_id}: {' -> '.join(tour.parks)} ({tour.length_km:,.0f} km)")

    tours_frame(result.tours, result.clustered).to_csv(args.out, index=False)
    print(f"Saved {args.out}")

    if args.map:
        provider = OSRMProvider(base_url=args.osrm_url) if args.osrm else StraightLineProvider()
        if args.osrm:
            print("Querying OSRM for road routes...")
        routes = resolve_tours(result.tours, provider)
        save_route_map(build_route_map(result.clustered, routes), args.map)
        print(f"Saved map to {args.map}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

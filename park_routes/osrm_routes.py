"""
Road geometry for tour segments.

Anything with a `route(from_coords, to_coords)` method can act as the
routing provider; `OSRMProvider` talks to an OSRM server over HTTP and
`StraightLineProvider` just joins the two endpoints. Coordinates are
(lon, lat) throughout, matching OSRM and GeoJSON.

A segment that cannot be routed is reported on its own `SegmentRoute`
and never stops the rest of the tour from being resolved.
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple

import requests

from .config import OSRM_BACKOFF_S, OSRM_BASE, OSRM_PROFILE, OSRM_RETRIES, OSRM_TIMEOUT_S
from .route_optimize import Segment, TourOrder

logger = logging.getLogger(__name__)

Coords = Tuple[float, float]

# Worth another try; every other HTTP error is final
RETRY_STATUS = {429, 500, 502, 503, 504}
TRANSIENT_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
)


class RouteUnavailableError(RuntimeError):
    """No road route could be produced for a segment."""


class RoutingProvider(Protocol):
    def route(self, from_coords: Coords, to_coords: Coords) -> List[Coords]:
        ...


class StraightLineProvider:
    """Offline provider: the geometry is the segment itself."""

    def route(self, from_coords: Coords, to_coords: Coords) -> List[Coords]:
        return [tuple(from_coords), tuple(to_coords)]


class OSRMProvider:
    def __init__(
        self,
        base_url: str = OSRM_BASE,
        profile: str = OSRM_PROFILE,
        timeout_s: float = OSRM_TIMEOUT_S,
        retries: int = OSRM_RETRIES,
        backoff_s: float = OSRM_BACKOFF_S,
        session: Optional[requests.Session] = None,
    ):
        if retries < 1:
            raise ValueError(f"retries must be >= 1, got {retries}")
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout_s = timeout_s
        self.retries = retries
        self.backoff_s = backoff_s
        self.session = session or requests.Session()

    def url_for(self, from_coords: Coords, to_coords: Coords) -> str:
        lon1, lat1 = from_coords
        lon2, lat2 = to_coords
        return (
            f"{self.base_url}/route/v1/{self.profile}/{lon1},{lat1};{lon2},{lat2}"
            "?overview=full&geometries=geojson"
        )

    def _get(self, url: str) -> dict:
        last_error = None
        for attempt in range(1, self.retries + 1):
            try:
                r = self.session.get(url, timeout=self.timeout_s)
            except TRANSIENT_ERRORS as e:
                last_error = e
            except requests.RequestException as e:
                raise RouteUnavailableError(f"OSRM request failed: {e}") from e
            else:
                if r.status_code not in RETRY_STATUS:
                    try:
                        r.raise_for_status()
                        return r.json()
                    except (requests.RequestException, ValueError) as e:
                        raise RouteUnavailableError(f"OSRM request failed: {e}") from e
                last_error = RouteUnavailableError(f"OSRM returned HTTP {r.status_code}")

            if attempt < self.retries:
                logger.debug("OSRM attempt %d/%d failed: %s", attempt, self.retries, last_error)
                time.sleep(self.backoff_s * attempt)

        raise RouteUnavailableError(
            f"OSRM unreachable after {self.retries} attempts: {last_error}"
        ) from last_error

    def route(self, from_coords: Coords, to_coords: Coords) -> List[Coords]:
        """Driving geometry between two points as a list of (lon, lat)."""
        data = self._get(self.url_for(from_coords, to_coords))
        if not isinstance(data, dict):
            raise RouteUnavailableError(f"OSRM returned a {type(data).__name__}, not an object")

        if data.get("code") != "Ok":
            raise RouteUnavailableError(f"OSRM error: {data.get('code')}: {data.get('message', '')}")
        routes = data.get("routes") or []
        if not routes:
            raise RouteUnavailableError("OSRM returned no routes")

        try:
            coords = routes[0]["geometry"]["coordinates"] or []
            geometry = [(float(lon), float(lat)) for lon, lat in coords]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise RouteUnavailableError(f"Malformed OSRM geometry: {e}") from e
        if not geometry:
            raise RouteUnavailableError("OSRM route has no geometry")
        return geometry


@dataclass(frozen=True)
class SegmentRoute:
    cluster_id: object
    segment: Segment
    geometry: Tuple[Coords, ...] = ()
    available: bool = True
    error: Optional[str] = None


def resolve_segment(cluster_id, segment: Segment, provider: RoutingProvider) -> SegmentRoute:
    try:
        geometry = provider.route(segment.from_coords, segment.to_coords)
    except RouteUnavailableError as e:
        logger.warning(
            "Route unavailable for %s -> %s: %s", segment.from_park, segment.to_park, e
        )
        return SegmentRoute(cluster_id, segment, available=False, error=str(e))
    return SegmentRoute(cluster_id, segment, geometry=tuple(geometry))


def resolve_tour(tour: TourOrder, provider: RoutingProvider) -> list[SegmentRoute]:
    return [resolve_segment(tour.cluster_id, seg, provider) for seg in tour.segments]


def resolve_tours(tours, provider: RoutingProvider) -> list[SegmentRoute]:
    routes = [r for tour in tours for r in resolve_tour(tour, provider)]
    missing = sum(1 for r in routes if not r.available)
    if missing:
        logger.warning("%d of %d segments have no road route", missing, len(routes))
    return routes

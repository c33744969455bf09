# park_routes/config.py

# === INPUT FILES ===
VISITS_CSV = "data/national_parks_visits.csv"
LOCATIONS_CSV = "data/parks.csv"
LOCATIONS_SEP = ","

# Raw column names -> our names
VISIT_COLUMNS = {
    "Region": "region",
    "State": "state",
    "Unit.Name": "park_name",
    "YearRaw": "year_raw",
    "Visitors": "visitors",
}
OPTIONAL_VISIT_COLUMNS = {
    "Unit.Code": "unit_code",
    "Unit.Type": "unit_type",
}
LOCATION_COLUMNS = {
    "Park Name": "park_name",
    "Latitude": "latitude",
    "Longitude": "longitude",
}

TOTAL_SENTINEL = "Total"  # synthetic per-park rows in the raw CSV
YEAR_MIN, YEAR_MAX = 1800, 2100

UNIT_TYPE = "National Park"
TOP_N_PARKS = 50

# === CLUSTERING ===
N_CLUSTERS = 5
CLUSTER_LINKAGE = "complete"
SUBCLUSTER_LINKAGE = "ward"
PARKS_PER_SUBCLUSTER = 5  # roughly one subcluster per five parks
DISTANCE_METRIC = "haversine"  # or "euclidean" (planar lon/lat degrees)

EARTH_RADIUS_KM = 6371.0088

# === TSP ===
TSP_METHOD = "nearest_insertion"  # or "ortools"
ORTOOLS_TIME_LIMIT_S = 10

# === ROUTING (OSRM) ===
OSRM_BASE = "https://router.project-osrm.org"
OSRM_PROFILE = "driving"
OSRM_TIMEOUT_S = 15
OSRM_RETRIES = 3
OSRM_BACKOFF_S = 0.8  # sleep backoff * attempt between retries

# === OUTPUT ===
OUTPUT_TOURS_CSV = "park_tours.csv"
OUTPUT_MAP_HTML = "park_tours.html"

# Fixed palette for clusters
PALETTE = [
    "#2A9D8F", "#E76F51", "#264653", "#F4A261", "#8AB17D",
    "#577590", "#FF9F1C", "#3D5A80", "#43AA8B", "#B56576",
]

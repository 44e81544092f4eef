"""H3 hexagon aggregation for map-scale heatmaps.

Consumes already-computed per-place intensity and nature, never raw
events. Each cell reports mean/max intensity, its place count and the
dominant nature by significance-weighted voting.
"""

import logging
import math
from collections import Counter
from collections.abc import Iterable

import h3
import mlflow
from mlflow.entities import SpanType

from changemap.compute.nature import weighted_scores
from changemap.core.schemas import HeatmapCellRecord
from changemap.core.types import HeatmapCell, Nature, PlaceForHeatmap

logger = logging.getLogger(__name__)

MIN_RESOLUTION = 0
MAX_RESOLUTION = 15

RESOLUTION_CITY = 7          # ~5.16 km²
RESOLUTION_NEIGHBORHOOD = 8  # ~0.74 km²
RESOLUTION_BLOCK = 9         # ~0.11 km²
DEFAULT_RESOLUTION = RESOLUTION_NEIGHBORHOOD


def _check_resolution(resolution: int) -> None:
    if not MIN_RESOLUTION <= resolution <= MAX_RESOLUTION:
        raise ValueError(
            f"H3 resolution must be between {MIN_RESOLUTION} and {MAX_RESOLUTION}, got {resolution}"
        )


def _round_half_up(value: float) -> int:
    # round() would send 50.5 to 50
    return math.floor(value + 0.5)


def get_cell_index(lat: float, lng: float, resolution: int) -> str:
    """H3 cell containing the coordinate at ``resolution``."""
    _check_resolution(resolution)
    return h3.latlng_to_cell(lat, lng, resolution)


def get_cell_boundary(h3_index: str) -> list[list[float]]:
    """Hexagon vertices as ``[lng, lat]`` pairs (GeoJSON order)."""
    # h3 returns (lat, lng) tuples
    return [[lng, lat] for lat, lng in h3.cell_to_boundary(h3_index)]


def dominant_nature(natures: Iterable[Nature]) -> Nature:
    """Weighted vote: count x significance, ties go to the more significant nature.

    Ties are broken by significance rather than by scan order, so two
    renovations (2 x 2) against one demolition (1 x 4) is a demolition
    cell regardless of how the places are ordered.
    """
    ranked = weighted_scores(Counter(natures))
    if not ranked:
        return Nature.MIXED
    return ranked[0][0]


@mlflow.trace(name="compute_heatmap_cells", span_type=SpanType.TOOL)
def compute_heatmap_cells(
    places: Iterable[PlaceForHeatmap],
    resolution: int = DEFAULT_RESOLUTION,
) -> list[HeatmapCell]:
    """Aggregate places into H3 cells, ordered by cell index."""
    _check_resolution(resolution)

    members: dict[str, list[PlaceForHeatmap]] = {}
    for place in places:
        if place.latitude is None or place.longitude is None:
            logger.debug("Skipping place without coordinates", extra={"place_id": place.id})
            continue
        index = h3.latlng_to_cell(place.latitude, place.longitude, resolution)
        members.setdefault(index, []).append(place)

    cells: list[HeatmapCell] = []
    for index in sorted(members):
        cell_places = members[index]
        boundary = get_cell_boundary(index)
        intensities = [p.intensity for p in cell_places]

        cells.append(HeatmapCell(
            h3_index=index,
            resolution=resolution,
            center_lat=sum(v[1] for v in boundary) / len(boundary),
            center_lng=sum(v[0] for v in boundary) / len(boundary),
            boundary=boundary,
            avg_intensity=_round_half_up(sum(intensities) / len(intensities)),
            max_intensity=max(intensities),
            place_count=len(cell_places),
            dominant_nature=dominant_nature(p.nature for p in cell_places),
        ))

    logger.debug("Aggregated %d cells at resolution %d", len(cells), resolution,
                 extra={"resolution": resolution, "count": len(cells)})
    return cells


def heatmap_record(cell: HeatmapCell) -> HeatmapCellRecord:
    return HeatmapCellRecord(
        h3_index=cell.h3_index,
        resolution=cell.resolution,
        center_lat=cell.center_lat,
        center_lng=cell.center_lng,
        boundary=cell.boundary,
        avg_intensity=cell.avg_intensity,
        max_intensity=cell.max_intensity,
        place_count=cell.place_count,
        dominant_nature=cell.dominant_nature,
    )

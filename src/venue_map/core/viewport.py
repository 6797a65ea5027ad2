"""Viewport filtering: which venues are visible, capped to a marker limit."""

import math
import logging
import re
from typing import Optional

import numpy as np

from .models import ViewportResult
from venue_map.models import Coordinate, VenueAnnotation, VenueRecord
from venue_map.state import ViewportBounds

logger = logging.getLogger(__name__)

MARKER_LIMIT = 1000

# Plain decimal only: no surrounding whitespace, "_" separators, or nan/inf spellings
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _parse_degrees(value: Optional[str]) -> Optional[float]:
    if value is None or not _DECIMAL_RE.fullmatch(value):
        return None
    parsed = float(value)
    return parsed if math.isfinite(parsed) else None


def parse_coordinate(venue: VenueRecord) -> Optional[Coordinate]:
    """Parse a venue's latitude/longitude strings.

    Returns None when either is missing or not a plain decimal number. Values
    are not range-checked; the viewport bounds decide whether a point shows.
    """
    lat = _parse_degrees(venue.latitude)
    lon = _parse_degrees(venue.longitude)
    if lat is None or lon is None:
        return None
    return Coordinate(lat=lat, lon=lon)


def visible_annotations(
    venues: list[VenueRecord],
    bounds: ViewportBounds,
    marker_limit: int = MARKER_LIMIT,
) -> ViewportResult:
    """Annotations for venues inside bounds (inclusive on every edge).

    Scans the whole collection on every call. When more than marker_limit
    venues match, the first marker_limit in collection order are kept and
    too_many_markers is set.
    """
    mappable: list[tuple[VenueRecord, Coordinate]] = []
    for venue in venues:
        coord = parse_coordinate(venue)
        if coord is not None:
            mappable.append((venue, coord))

    n = len(mappable)
    lats = np.fromiter((c.lat for _, c in mappable), dtype=np.float64, count=n)
    lons = np.fromiter((c.lon for _, c in mappable), dtype=np.float64, count=n)
    inside = (
        (lats >= bounds.min_lat) & (lats <= bounds.max_lat)
        & (lons >= bounds.min_lon) & (lons <= bounds.max_lon)
    )
    hits = np.flatnonzero(inside)

    too_many = len(hits) > marker_limit
    annotations = [
        VenueAnnotation(id=venue.id, coordinate=coord, title=venue.venuename)
        for venue, coord in (mappable[i] for i in hits[:marker_limit])
    ]

    logger.debug(
        "Viewport pass: %d venues, %d mappable, %d inside, %d shown",
        len(venues), n, len(hits), len(annotations),
    )
    return ViewportResult(annotations=annotations, too_many_markers=too_many, matched=len(hits))


def filter_by_region(
    venues: list[VenueRecord],
    region: Optional[str],
    authority: Optional[str] = None,
) -> list[VenueRecord]:
    """Exact-match filter on county and, optionally, local authority.

    An empty or missing region returns the venues unchanged.
    """
    if not region:
        return list(venues)
    if authority:
        return [v for v in venues if v.county == region and v.local_authority == authority]
    return [v for v in venues if v.county == region]

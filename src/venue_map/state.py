"""Published state of the venue map.

Holds the full venue collection, the current viewport, the derived marker
annotations, loading progress and the last error. The MapController is the
only writer; everything else reads snapshots.
"""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from venue_map.models import VenueRecord, VenueAnnotation


class ViewportBounds(BaseModel):
    """Visible map rectangle given as center plus span (degrees).

    min/max are derived as center -/+ span/2 and are not clamped, so a
    viewport near the anti-meridian simply extends past +/-180.
    """
    model_config = ConfigDict(frozen=True)

    center_lat: float = Field(default=51.5074, ge=-90, le=90)
    center_lon: float = Field(default=-0.1278, ge=-180, le=180)
    lat_span: float = Field(default=0.2, ge=0, le=180)
    lon_span: float = Field(default=0.2, ge=0, le=360)

    @property
    def min_lat(self) -> float:
        return self.center_lat - self.lat_span / 2

    @property
    def max_lat(self) -> float:
        return self.center_lat + self.lat_span / 2

    @property
    def min_lon(self) -> float:
        return self.center_lon - self.lon_span / 2

    @property
    def max_lon(self) -> float:
        return self.center_lon + self.lon_span / 2

    def contains(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


class MapState(BaseModel):
    full_collection: list[VenueRecord] = []
    viewport: ViewportBounds = Field(default_factory=ViewportBounds)
    annotations: list[VenueAnnotation] = []
    too_many_markers: bool = False
    is_loading: bool = False
    loading_progress: float = Field(default=0.0, ge=0.0, le=1.0)
    last_error: Optional[str] = None
    selected_venue: Optional[VenueRecord] = None
    regions: list[str] = []
    authorities_by_region: dict[str, list[str]] = {}

    def summary(self) -> dict:
        v = self.viewport
        return {
            "venues": {
                "loaded": len(self.full_collection),
                "is_loading": self.is_loading,
                "loading_progress": self.loading_progress,
                "last_error": self.last_error,
            },
            "viewport": {
                "center_lat": v.center_lat,
                "center_lon": v.center_lon,
                "lat_span": v.lat_span,
                "lon_span": v.lon_span,
            },
            "markers": {
                "visible": len(self.annotations),
                "too_many_markers": self.too_many_markers,
            },
            "selection": {
                "venue_id": self.selected_venue.id if self.selected_venue else None,
                "venuename": self.selected_venue.venuename if self.selected_venue else None,
            },
            "regions": {
                "count": len(self.regions),
                "authorities_loaded_for": sorted(self.authorities_by_region),
            },
        }


# Global map state, one per server process
state = MapState()

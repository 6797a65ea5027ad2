"""Pydantic return models for core computation functions."""

from pydantic import BaseModel

from venue_map.models import VenueAnnotation


class ViewportResult(BaseModel):
    """Return type for visible_annotations."""
    annotations: list[VenueAnnotation] = []
    too_many_markers: bool = False
    matched: int = 0

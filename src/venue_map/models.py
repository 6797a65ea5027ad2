"""Pydantic domain models for venues and map annotations."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Coordinate(BaseModel):
    """Parsed lat/lon pair. Not range-checked; the viewport decides visibility."""
    lat: float
    lon: float


class VenueRecord(BaseModel):
    """One row of the Venue table.

    latitude/longitude are kept as the raw strings the store returns; they are
    parsed on demand because either may be missing or non-numeric.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: int
    venuename: str
    address: str
    town: str
    county: str
    postcode: str
    address2: Optional[str] = None
    fsa_id: Optional[int] = None
    slug: Optional[str] = None
    venuetype: Optional[str] = None
    postalsearch: Optional[str] = None
    telephone: Optional[str] = None
    easting: Optional[str] = None
    northing: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    local_authority: Optional[str] = None
    website: Optional[str] = None
    photo: Optional[str] = None
    is_live: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class VenueAnnotation(BaseModel):
    """Map marker projected from a VenueRecord."""
    model_config = ConfigDict(frozen=True)

    id: int
    coordinate: Coordinate
    title: str

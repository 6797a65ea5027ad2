"""Tests for state Pydantic models."""
import pytest
from pydantic import ValidationError


class TestViewportBounds:
    def test_defaults_center_on_london(self):
        from venue_map.state import ViewportBounds
        b = ViewportBounds()
        assert b.center_lat == pytest.approx(51.5074)
        assert b.center_lon == pytest.approx(-0.1278)
        assert b.lat_span == pytest.approx(0.2)
        assert b.lon_span == pytest.approx(0.2)

    def test_min_max_are_center_plus_minus_half_span(self):
        from venue_map.state import ViewportBounds
        b = ViewportBounds(center_lat=51.5, center_lon=-0.12, lat_span=0.2, lon_span=0.4)
        assert b.min_lat == pytest.approx(51.4)
        assert b.max_lat == pytest.approx(51.6)
        assert b.min_lon == pytest.approx(-0.32)
        assert b.max_lon == pytest.approx(0.08)

    def test_contains_is_inclusive(self):
        from venue_map.state import ViewportBounds
        b = ViewportBounds(center_lat=0.0, center_lon=0.0, lat_span=2.0, lon_span=2.0)
        assert b.contains(1.0, 1.0)
        assert b.contains(-1.0, -1.0)
        assert b.contains(0.0, 0.0)
        assert not b.contains(1.0000001, 0.0)
        assert not b.contains(0.0, -1.0000001)

    def test_zero_span_contains_only_center(self):
        from venue_map.state import ViewportBounds
        b = ViewportBounds(center_lat=10.0, center_lon=20.0, lat_span=0.0, lon_span=0.0)
        assert b.contains(10.0, 20.0)
        assert not b.contains(10.0, 20.0001)

    def test_bounds_are_not_clamped_at_antimeridian(self):
        from venue_map.state import ViewportBounds
        b = ViewportBounds(center_lat=0.0, center_lon=179.0, lat_span=1.0, lon_span=4.0)
        assert b.max_lon == pytest.approx(181.0)
        assert not b.contains(0.0, -179.5)

    def test_center_lat_out_of_range(self):
        from venue_map.state import ViewportBounds
        with pytest.raises(ValidationError):
            ViewportBounds(center_lat=91.0)

    def test_center_lon_out_of_range(self):
        from venue_map.state import ViewportBounds
        with pytest.raises(ValidationError):
            ViewportBounds(center_lon=-181.0)

    def test_negative_span_rejected(self):
        from venue_map.state import ViewportBounds
        with pytest.raises(ValidationError):
            ViewportBounds(lat_span=-0.1)


class TestMapState:
    def test_defaults(self):
        from venue_map.state import MapState
        s = MapState()
        assert s.full_collection == []
        assert s.annotations == []
        assert s.too_many_markers is False
        assert s.is_loading is False
        assert s.loading_progress == 0.0
        assert s.last_error is None
        assert s.selected_venue is None

    def test_progress_must_be_a_fraction(self):
        from venue_map.state import MapState
        with pytest.raises(ValidationError):
            MapState(loading_progress=1.5)

    def test_summary_keys(self):
        from venue_map.state import MapState
        summary = MapState().summary()
        assert set(summary) == {"venues", "viewport", "markers", "selection", "regions"}
        assert summary["venues"]["loaded"] == 0
        assert summary["markers"]["too_many_markers"] is False
        assert summary["selection"]["venue_id"] is None

    def test_summary_reports_selection(self):
        from venue_map.state import MapState
        from venue_map.models import VenueRecord
        venue = VenueRecord(
            id=3, venuename="The Anchor", address="2 Quay", town="Bristol",
            county="Bristol", postcode="BS1 1AA",
        )
        s = MapState(full_collection=[venue], selected_venue=venue)
        summary = s.summary()
        assert summary["venues"]["loaded"] == 1
        assert summary["selection"] == {"venue_id": 3, "venuename": "The Anchor"}

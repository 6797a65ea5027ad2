"""Tests for load_venues progress notifications."""
import pytest
from unittest.mock import AsyncMock, MagicMock


class FakeStore:
    def __init__(self, n_venues, fail_at_offset=None):
        from venue_map.models import VenueRecord
        self.venues = [
            VenueRecord(
                id=i, venuename=f"Venue {i}", address="1 High Street", town="Town",
                county="County", postcode="AB1 2CD", latitude="51.5", longitude="-0.12",
            )
            for i in range(1, n_venues + 1)
        ]
        self.fail_at_offset = fail_at_offset

    async def fetch_venue_page(self, offset, limit):
        from venue_map.core.store import StoreError
        if offset == self.fail_at_offset:
            raise StoreError("Venue request failed with HTTP 502")
        return self.venues[offset:offset + limit]


@pytest.fixture
def fresh_controller(monkeypatch):
    from venue_map.controller import controller
    from venue_map.state import MapState
    monkeypatch.setattr(controller, "state", MapState())
    monkeypatch.setattr(controller, "page_size", 1000)
    monkeypatch.setattr(controller, "max_pages", 100)
    monkeypatch.setattr(controller, "marker_limit", 1000)
    return controller


def _get_load_venues_fn():
    from venue_map.tools.data import register_data_tools
    tools = {}
    mock_mcp = MagicMock()
    def capture(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn
        return decorator
    mock_mcp.tool = capture
    register_data_tools(mock_mcp)
    return tools["load_venues"]


@pytest.mark.anyio
async def test_load_venues_reports_progress_per_page(fresh_controller, monkeypatch):
    """load_venues should call ctx.report_progress once per fetched page."""
    monkeypatch.setattr(fresh_controller, "store", FakeStore(2500))
    load_venues = _get_load_venues_fn()

    mock_ctx = AsyncMock()
    progress_values = []

    async def capture_progress(current, total):
        progress_values.append((current, total))

    mock_ctx.report_progress = capture_progress

    result = await load_venues(ctx=mock_ctx)

    assert progress_values[:3] == [(1, 100), (2, 100), (3, 100)]
    assert "2500" in result


@pytest.mark.anyio
async def test_load_venues_final_progress_equals_total(fresh_controller, monkeypatch):
    """Final progress call should have current == total even when few pages were needed."""
    monkeypatch.setattr(fresh_controller, "store", FakeStore(10))
    load_venues = _get_load_venues_fn()

    mock_ctx = AsyncMock()
    progress_values = []

    async def capture_progress(current, total):
        progress_values.append((current, total))

    mock_ctx.report_progress = capture_progress

    await load_venues(ctx=mock_ctx)

    last_current, last_total = progress_values[-1]
    assert last_current == last_total == 100
    assert fresh_controller.state.loading_progress == 1.0


@pytest.mark.anyio
async def test_load_venues_progress_is_nondecreasing(fresh_controller, monkeypatch):
    monkeypatch.setattr(fresh_controller, "store", FakeStore(4200))
    load_venues = _get_load_venues_fn()

    mock_ctx = AsyncMock()
    progress_values = []

    async def capture_progress(current, total):
        progress_values.append(current)

    mock_ctx.report_progress = capture_progress

    await load_venues(ctx=mock_ctx)

    assert progress_values == sorted(progress_values)


@pytest.mark.anyio
async def test_load_venues_reports_too_many_markers(fresh_controller, monkeypatch):
    monkeypatch.setattr(fresh_controller, "store", FakeStore(1500))
    load_venues = _get_load_venues_fn()

    result = await load_venues(ctx=AsyncMock())

    assert "1000 marker(s)" in result
    assert "too many markers" in result
    assert fresh_controller.state.too_many_markers is True


@pytest.mark.anyio
async def test_load_venues_failure_returns_error(fresh_controller, monkeypatch):
    monkeypatch.setattr(fresh_controller, "store", FakeStore(2500, fail_at_offset=1000))
    load_venues = _get_load_venues_fn()

    mock_ctx = AsyncMock()
    progress_values = []

    async def capture_progress(current, total):
        progress_values.append((current, total))

    mock_ctx.report_progress = capture_progress

    result = await load_venues(ctx=mock_ctx)

    assert result.startswith("Error:")
    assert "502" in result
    assert progress_values == [(1, 100)]
    assert fresh_controller.state.full_collection == []
    assert fresh_controller.state.loading_progress == 0.0

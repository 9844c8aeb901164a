"""Tests for the date bucketing index and the calendar routes."""
from datetime import date, datetime, timezone

import pytest

from eventfeed.schemas.event import EventOut
from eventfeed.services.calendar_service import build_date_index


def _event(event_id: str, when) -> EventOut:
    return EventOut(event_id=event_id, title=event_id, owner_id="owner", date=when)


class TestDateIndex:

    def test_buckets_are_exactly_the_distinct_days(self):
        events = [
            _event("a", "2026-11-05T09:00:00Z"),
            _event("b", "2026-11-06T09:00:00Z"),
            _event("c", "2026-11-05T20:00:00Z"),
            _event("d", "2026-11-07T12:00:00Z"),
        ]
        index = build_date_index(events, "UTC")
        assert sorted(index.dates()) == ["2026-11-05", "2026-11-06", "2026-11-07"]
        assert [e.event_id for e in index.events_on("2026-11-05")] == ["a", "c"]
        assert [e.event_id for e in index.events_on("2026-11-06")] == ["b"]

    def test_order_within_a_day_follows_input_order(self):
        events = [
            _event("late", "2026-11-05T22:00:00Z"),
            _event("early", "2026-11-05T08:00:00Z"),
        ]
        index = build_date_index(events, "UTC")
        assert [e.event_id for e in index.events_on("2026-11-05")] == ["late", "early"]

    def test_events_without_a_date_are_skipped(self):
        events = [_event("dated", "2026-11-05T10:00:00Z"), _event("undated", None)]
        index = build_date_index(events, "UTC")
        assert len(index) == 1
        all_ids = [e.event_id for bucket in index.as_dict().values() for e in bucket]
        assert all_ids == ["dated"]

    def test_unknown_day_is_an_empty_list(self):
        index = build_date_index([], "UTC")
        assert index.events_on("2030-01-01") == []
        assert "2030-01-01" not in index

    def test_lookup_accepts_date_and_datetime(self):
        index = build_date_index([_event("a", "2026-11-05T10:00:00Z")], "UTC")
        assert index.events_on(date(2026, 11, 5))[0].event_id == "a"
        assert index.events_on(datetime(2026, 11, 5, 1, tzinfo=timezone.utc))[0].event_id == "a"

    def test_calendar_zone_decides_the_day(self):
        index = build_date_index([_event("a", "2026-11-05T23:30:00Z")], "Asia/Tokyo")
        assert index.dates() == ["2026-11-06"]

    def test_unknown_zone_fails_fast(self):
        import pytz
        with pytest.raises(pytz.UnknownTimeZoneError):
            build_date_index([], "Mars/Olympus_Mons")


class TestMarkedOverlay:

    def test_selected_day_with_events(self):
        index = build_date_index([_event("a", "2026-11-05T10:00:00Z")], "UTC")
        overlay = index.marked("2026-11-05")
        assert overlay["2026-11-05"]["selected"] is True
        assert overlay["2026-11-05"]["marked"] is True

    def test_selected_empty_day_is_added_unmarked(self):
        index = build_date_index([_event("a", "2026-11-05T10:00:00Z")], "UTC")
        overlay = index.marked("2026-11-09")
        assert overlay["2026-11-09"] == {"marked": False, "selected": True, "events": []}
        assert overlay["2026-11-05"]["selected"] is False

    def test_overlay_does_not_touch_the_index(self):
        index = build_date_index([_event("a", "2026-11-05T10:00:00Z")], "UTC")
        index.marked("2026-11-09")
        assert index.dates() == ["2026-11-05"]
        assert index.events_on("2026-11-09") == []

    def test_exactly_one_selected_day(self):
        index = build_date_index([
            _event("a", "2026-11-05T10:00:00Z"),
            _event("b", "2026-11-06T10:00:00Z"),
        ], "UTC")
        overlay = index.marked(date(2026, 11, 6))
        assert [day for day, entry in overlay.items() if entry["selected"]] == ["2026-11-06"]


class TestCalendarRoutes:

    def test_calendar_lists_days_and_selection(self, client, repo):
        repo.seed(
            {"event_id": "a", "owner_id": "o", "date": "2026-11-05T10:00:00Z"},
            {"event_id": "b", "owner_id": "o", "date": None},
        )
        resp = client.get("/api/calendar/", params={"selected": "2026-11-07"})
        assert resp.status_code == 200
        days = {d["date"]: d for d in resp.json()}
        assert set(days) == {"2026-11-05", "2026-11-07"}
        assert days["2026-11-05"]["marked"] is True
        assert [e["event_id"] for e in days["2026-11-05"]["events"]] == ["a"]
        assert days["2026-11-07"]["selected"] is True
        assert days["2026-11-07"]["events"] == []

    def test_day_lookup(self, client, repo):
        repo.seed({"event_id": "a", "owner_id": "o", "date": "2026-11-05T10:00:00Z"})
        assert [e["event_id"] for e in client.get("/api/calendar/2026-11-05").json()] == ["a"]
        assert client.get("/api/calendar/2026-12-25").json() == []

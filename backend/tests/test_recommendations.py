"""Tests for the recommendation ranker.

Covers:
- Own events never recommended
- At most ten results
- Favorite bonus plus attendee count, stable on ties
- Deterministic across calls
- Any store failure -> RecommendationUnavailable
"""
import pytest

from eventfeed.errors import NotAuthenticated, RecommendationUnavailable
from eventfeed.schemas.engagement import FavoritesRecord
from eventfeed.schemas.event import EventOut
from eventfeed.services import recommendation_service
from eventfeed.services.recommendation_service import rank_events
from eventfeed.session import ANONYMOUS
from tests.conftest import as_user, auth


async def _favorite(repo, user_id, *event_ids):
    await repo.put_favorites_record(user_id, FavoritesRecord(user_id=user_id, favorites=list(event_ids)))


class TestRecommend:

    @pytest.mark.asyncio
    async def test_favorite_outranks_popularity(self, repo):
        repo.seed(
            {"event_id": "a", "owner_id": "u2", "attendees": []},
            {"event_id": "b", "owner_id": "u2", "attendees": ["x", "y", "z"]},
        )
        await _favorite(repo, "u1", "a")
        result = await recommendation_service.recommend(repo, as_user("u1"))
        assert [e.event_id for e in result] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_own_events_are_excluded(self, repo):
        repo.seed(
            {"event_id": "mine", "owner_id": "u1", "attendees": ["x", "y", "z", "w"]},
            {"event_id": "theirs", "owner_id": "u2"},
        )
        await _favorite(repo, "u1", "mine")
        result = await recommendation_service.recommend(repo, as_user("u1"))
        assert [e.event_id for e in result] == ["theirs"]
        assert all(e.owner_id != "u1" for e in result)

    @pytest.mark.asyncio
    async def test_at_most_ten(self, repo):
        repo.seed(*[{"event_id": f"e{i}", "owner_id": "o", "attendees": ["x"] * (i % 4)} for i in range(25)])
        result = await recommendation_service.recommend(repo, as_user("u"))
        assert len(result) == 10

    @pytest.mark.asyncio
    async def test_empty_store_is_empty_list(self, repo):
        assert await recommendation_service.recommend(repo, as_user("u")) == []

    @pytest.mark.asyncio
    async def test_ties_keep_newest_first_listing_order(self, repo):
        repo.seed(
            {"event_id": "first", "owner_id": "o", "attendees": ["x"]},
            {"event_id": "second", "owner_id": "o", "attendees": ["y"]},
            {"event_id": "third", "owner_id": "o", "attendees": ["z"]},
        )
        result = await recommendation_service.recommend(repo, as_user("u"))
        assert [e.event_id for e in result] == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_repeated_calls_are_identical(self, repo):
        repo.seed(*[{"event_id": f"e{i}", "owner_id": "o", "attendees": ["x"] * (i % 3)} for i in range(15)])
        await _favorite(repo, "u", "e4", "e9")
        first = [e.event_id for e in await recommendation_service.recommend(repo, as_user("u"))]
        for _ in range(3):
            again = [e.event_id for e in await recommendation_service.recommend(repo, as_user("u"))]
            assert again == first

    @pytest.mark.asyncio
    async def test_rsvp_history_is_read_but_not_scored(self, repo):
        repo.seed(
            {"event_id": "rsvped", "owner_id": "o"},
            {"event_id": "popular", "owner_id": "o", "attendees": ["x"]},
        )
        await repo.put_rsvp("u", "rsvped", "attending")
        result = await recommendation_service.recommend(repo, as_user("u"))
        assert "list_rsvps" in repo.calls
        assert [e.event_id for e in result] == ["popular", "rsvped"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["list_rsvps", "get_favorites_record", "list_events"])
    async def test_any_read_failure_is_unavailable(self, repo, operation):
        repo.seed({"event_id": "a", "owner_id": "o"})
        repo.failing_operations.add(operation)
        with pytest.raises(RecommendationUnavailable):
            await recommendation_service.recommend(repo, as_user("u"))

    @pytest.mark.asyncio
    async def test_requires_a_user(self, repo):
        with pytest.raises(NotAuthenticated):
            await recommendation_service.recommend(repo, ANONYMOUS)


class TestRankEvents:

    def _events(self):
        return [
            EventOut(event_id="a", title="a", owner_id="o", attendees=["1", "2"]),
            EventOut(event_id="b", title="b", owner_id="o", attendees=[]),
            EventOut(event_id="c", title="c", owner_id="me", attendees=["1", "2", "3"]),
            EventOut(event_id="d", title="d", owner_id="o", attendees=["1", "2"]),
        ]

    def test_pure_ranking(self):
        ranked = rank_events(self._events(), "me", {"b"}, limit=10, favorite_weight=10)
        assert [e.event_id for e in ranked] == ["b", "a", "d"]

    def test_limit_and_weight_are_parameters(self):
        ranked = rank_events(self._events(), "me", {"b"}, limit=2, favorite_weight=1)
        assert [e.event_id for e in ranked] == ["a", "d"]


class TestRecommendationRoute:

    def test_route(self, client, repo):
        repo.seed(
            {"event_id": "a", "owner_id": "u2", "attendees": []},
            {"event_id": "b", "owner_id": "u2", "attendees": ["x", "y", "z"]},
        )
        client.post("/api/favorites/a/toggle", headers=auth("u1"))
        resp = client.get("/api/recommendations/", headers=auth("u1"))
        assert resp.status_code == 200
        assert [e["event_id"] for e in resp.json()] == ["a", "b"]

    def test_store_down_is_503(self, client, repo):
        repo.fail_with = ConnectionError("down")
        resp = client.get("/api/recommendations/", headers=auth("u1"))
        assert resp.status_code == 503
        assert resp.json()["detail"] == "Recommendations are temporarily unavailable"

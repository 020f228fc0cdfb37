"""Unit tests for ranking, selection and the small pure helpers."""

import pytest

from conftest import make_candidate
from models import ItineraryStop, StopLocation
from utils import (
    adventure_score,
    dedupe,
    maps_url,
    miles_to_meters,
    neighborhood_label,
    rank,
    select,
    total_hours,
)


def _stop(minutes: int, order: int = 1) -> ItineraryStop:
    return ItineraryStop(
        id=f"s{order}",
        order=order,
        kind="activity",
        name="x",
        estimatedDurationMinutes=minutes,
        location=StopLocation(lat=0, lng=0),
    )


class TestConversions:

    def test_thirty_miles(self) -> None:
        assert miles_to_meters(30) == 48280

    def test_one_and_hundred_miles(self) -> None:
        assert miles_to_meters(1) == 1609
        assert miles_to_meters(100) == 160934

    def test_total_hours_rounds_to_one_decimal(self) -> None:
        stops = [_stop(35, 1), _stop(120, 2), _stop(90, 3), _stop(75, 4)]
        assert sum(s.estimatedDurationMinutes for s in stops) == 320
        assert total_hours(stops) == 5.3

    @pytest.mark.parametrize("minutes,expected", [([75, 120], 3.3), ([75], 1.3), ([35, 120, 120, 40], 5.3)])
    def test_total_hours_halves_round_up(self, minutes, expected) -> None:
        stops = [_stop(m, i) for i, m in enumerate(minutes, start=1)]
        assert total_hours(stops) == expected

    def test_total_hours_full_day(self) -> None:
        stops = [_stop(35, 1), _stop(120, 2), _stop(120, 3), _stop(75, 4)]
        assert total_hours(stops) == 5.8

    def test_maps_url_encodes_id(self) -> None:
        assert maps_url("ChIJ abc/123") == "https://maps.google.com/maps/place/?q=place_id:ChIJ%20abc%2F123"
        assert maps_url("ChIJabc") == "https://maps.google.com/maps/place/?q=place_id:ChIJabc"


class TestAdventureScore:

    def test_explicit_score_wins(self) -> None:
        assert adventure_score(4, "hot") == 4

    @pytest.mark.parametrize("label,expected", [("mild", 2), ("medium", 6), ("hot", 9)])
    def test_derived_from_spice(self, label, expected) -> None:
        assert adventure_score(None, label) == expected

    def test_nothing_given(self) -> None:
        assert adventure_score(None, None) is None


class TestRank:

    def test_orders_by_rating_then_count(self) -> None:
        items = [
            make_candidate("a", rating=4.0, count=10),
            make_candidate("b", rating=4.5, count=5),
            make_candidate("c", rating=4.5, count=50),
        ]
        assert [c.id for c in rank(items)] == ["c", "b", "a"]

    def test_missing_rating_and_count_are_zero(self) -> None:
        items = [
            make_candidate("none"),
            make_candidate("low", rating=0.5),
            make_candidate("zero-count", rating=0.5, count=0),
        ]
        assert [c.id for c in rank(items)] == ["low", "zero-count", "none"]

    def test_full_ties_keep_input_order(self) -> None:
        items = [make_candidate(str(i), rating=4.0, count=10) for i in range(6)]
        assert [c.id for c in rank(items)] == ["0", "1", "2", "3", "4", "5"]

    def test_filters_ineligible(self) -> None:
        items = [
            make_candidate(None, rating=5.0),
            make_candidate("no-name", name=None, rating=5.0),
            make_candidate("no-lat", lat=None, rating=5.0),
            make_candidate("no-lng", lng=None, rating=5.0),
            make_candidate("ok", rating=1.0),
        ]
        assert [c.id for c in rank(items)] == ["ok"]

    def test_deterministic_across_runs(self) -> None:
        items = [
            make_candidate("a", rating=4.1, count=3),
            make_candidate("b"),
            make_candidate("c", rating=4.1, count=3),
            make_candidate("d", rating=4.9),
        ]
        first = [c.id for c in rank(items)]
        for _ in range(20):
            assert [c.id for c in rank(list(items))] == first
        assert first == ["d", "a", "c", "b"]

    def test_does_not_mutate_input(self) -> None:
        items = [make_candidate("a", rating=1.0), make_candidate("b", rating=2.0)]
        rank(items)
        assert [c.id for c in items] == ["a", "b"]


class TestSelect:

    def test_takes_top_n(self) -> None:
        items = [make_candidate("a", rating=3.0), make_candidate("b", rating=4.0), make_candidate("c", rating=5.0)]
        assert [c.id for c in select(items, 2)] == ["c", "b"]

    def test_skips_excluded(self) -> None:
        items = [make_candidate("a", rating=3.0), make_candidate("b", rating=4.0)]
        assert [c.id for c in select(items, 1, exclude={"b"})] == ["a"]

    def test_empty(self) -> None:
        assert select([], 1) == []

    def test_dedupe_first_wins(self) -> None:
        items = [make_candidate("a", name="first"), make_candidate("a", name="second"), make_candidate("b")]
        out = dedupe(items)
        assert [c.name for c in out] == ["first", "Somewhere"]


class TestNeighborhoodLabel:

    def test_prefers_neighborhood(self) -> None:
        components = [
            {"longText": "Portland", "shortText": "Portland", "types": ["locality", "political"]},
            {"longText": "Pearl District", "shortText": "Pearl", "types": ["neighborhood", "political"]},
        ]
        assert neighborhood_label(components) == "Pearl District"

    def test_priority_order(self) -> None:
        components = [
            {"longText": "Multnomah County", "types": ["administrative_area_level_2"]},
            {"longText": "Portland", "types": ["locality"]},
            {"longText": "Northwest", "types": ["sublocality", "sublocality_level_1"]},
        ]
        assert neighborhood_label(components) == "Northwest"

    def test_falls_back_to_county(self) -> None:
        components = [{"longText": "Multnomah County", "types": ["administrative_area_level_2"]}]
        assert neighborhood_label(components) == "Multnomah County"

    def test_short_text_when_no_long_text(self) -> None:
        assert neighborhood_label([{"shortText": "NW", "types": ["neighborhood"]}]) == "NW"

    def test_legacy_shape(self) -> None:
        components = [{"long_name": "Alberta Arts", "short_name": "Alberta", "types": ["neighborhood"]}]
        assert neighborhood_label(components) == "Alberta Arts"

    def test_nothing_matches(self) -> None:
        assert neighborhood_label([{"longText": "USA", "types": ["country"]}]) is None
        assert neighborhood_label([]) is None

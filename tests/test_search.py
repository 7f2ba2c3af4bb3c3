import copy

import pytest

from roomfinder.data_loader import load_listings_df
from roomfinder.exceptions import InvalidCriteriaError
from roomfinder.search import (
    classify_availability,
    default_criteria,
    normalize_criteria,
    query,
    run_query_pipeline,
    search_listings,
)


def _scenario_records():
    return [
        {
            "id": "r1",
            "name": "Sunshine House",
            "location": "서울 강남구 역삼동",
            "tags": ["역세권"],
            "price": 300000,
            "rating": 4.5,
            "room_status": {"available_rooms": 3, "total_rooms": 10},
        },
        {
            "id": "r2",
            "name": "Lakeview Living",
            "location": "서울 관악구 봉천동",
            "tags": ["가성비"],
            "price": 600000,
            "rating": 4.0,
            "room_status": {
                "available_rooms": 0,
                "total_rooms": 5,
                "scheduled_vacancy_rooms": 2,
            },
        },
    ]


def _record(rid, rating=4.0, marketing=None, **extra):
    rec = {"id": rid, "name": rid, "location": "서울", "rating": rating}
    if marketing is not None:
        rec["marketing"] = marketing
    rec.update(extra)
    return rec


def _ids(results):
    return [r["id"] for r in results]


def test_rating_sort_scenario():
    out = query(_scenario_records(), {"sort": "rating"})
    assert _ids(out) == ["r1", "r2"]


def test_scheduled_vacancy_scenario():
    out = query(_scenario_records(), {"availability": "scheduled_vacancy"})
    assert _ids(out) == ["r2"]
    assert out[0]["availability_category"] == "scheduled_vacancy"


def test_price_range_scenario():
    out = query(_scenario_records(), {"price_range": {"min": 0, "max": 400000}})
    assert _ids(out) == ["r1"]


def test_price_range_bounds_are_inclusive():
    out = query(_scenario_records(), {"price_range": {"min": 300000, "max": 600000}})
    assert _ids(out) == ["r1", "r2"]


def test_search_term_matches_tag_only():
    out = query(_scenario_records(), {"search_term": "가성비"})
    assert _ids(out) == ["r2"]


def test_search_term_is_case_insensitive():
    assert _ids(query(_scenario_records(), {"search_term": "SUNSHINE"})) == ["r1"]
    assert _ids(query(_scenario_records(), {"search_term": "관악"})) == ["r2"]


def test_all_filters_disabled_returns_everything_by_rating():
    df = load_listings_df()
    out = search_listings(default_criteria(), df)
    expected = sorted(df.to_dict(orient="records"), key=lambda r: -r["rating"])
    assert _ids(out) == [r["id"] for r in expected]
    assert len(out) == len(df)


def test_enabling_filters_only_removes_records():
    df = load_listings_df()
    all_ids = set(_ids(search_listings(None, df)))
    for criteria in [
        {"search_term": "역세권"},
        {"region": "성북구"},
        {"subway_station": "강남역"},
        {"university": "고려대학교"},
        {"price_range": {"min": 300000, "max": 450000}},
        {"promotion": "discount"},
        {"availability": "many_rooms"},
    ]:
        ids = set(_ids(search_listings(criteria, df)))
        assert ids <= all_ids
        assert len(ids) < len(all_ids)


def test_requery_over_own_output_is_unchanged():
    criteria = {"region": "성북구", "sort": "availability"}
    df = load_listings_df()
    first = search_listings(criteria, df)
    second = query(first, criteria)
    assert _ids(second) == _ids(first)

    records = _scenario_records()
    once = query(records, {"availability": "scheduled_vacancy"})
    assert _ids(query(once, {"availability": "scheduled_vacancy"})) == ["r2"]


def test_sort_is_stable_for_equal_keys():
    records = [_record("a", 4.0), _record("b", 4.5), _record("c", 4.0), _record("d", 4.0)]
    assert _ids(query(records, {"sort": "rating"})) == ["b", "a", "c", "d"]


def test_discount_sort_puts_missing_marketing_last():
    records = [
        _record("none"),
        _record("small", marketing={"promotion_type": "discount", "discount_rate": 0.05}),
        _record("big", marketing={"promotion_type": "discount", "discount_rate": 0.3}),
        _record("deposit", marketing={"promotion_type": "free_deposit"}),
    ]
    assert _ids(query(records, {"sort": "discount"})) == ["big", "small", "none", "deposit"]


def test_urgency_sort_ranks_levels():
    records = [
        _record("none"),
        _record("low", marketing={"urgency_level": "low"}),
        _record("high", marketing={"urgency_level": "high"}),
        _record("medium", marketing={"urgency_level": "medium"}),
    ]
    assert _ids(query(records, {"sort": "urgency"})) == ["high", "medium", "low", "none"]


def test_availability_sort_by_available_rooms():
    records = [
        _record("one", room_status={"available_rooms": 1, "total_rooms": 5}),
        _record("five", room_status={"available_rooms": 5, "total_rooms": 5}),
        _record("zero"),
    ]
    assert _ids(query(records, {"sort": "availability"})) == ["five", "one", "zero"]


def test_classification_decision_list():
    assert classify_availability(
        {"marketing": {"urgency_level": "high"}, "available_rooms": 1}
    ) == "urgent"
    assert classify_availability({"available_rooms": 2, "occupancy_rate": 10}) == "few_rooms"
    assert classify_availability(
        {"available_rooms": 0, "scheduled_vacancy_rooms": 1, "occupancy_rate": 100}
    ) == "scheduled_vacancy"
    assert classify_availability({"available_rooms": 8, "occupancy_rate": 20}) == "many_rooms"
    assert classify_availability({"available_rooms": 3, "occupancy_rate": 70}) is None
    # partial records fall back to zero values
    assert classify_availability({}) == "many_rooms"


def test_classification_on_dataset():
    df = load_listings_df()
    got = {r["id"]: r["availability_category"] for r in search_listings(None, df)}
    assert got == {
        "gw-001": None,
        "gw-002": "urgent",
        "gw-003": "scheduled_vacancy",
        "gw-004": "many_rooms",
        "gw-005": "urgent",
        "gw-006": None,
        "gw-007": "few_rooms",
        "gw-008": "many_rooms",
        "gw-009": None,
        "gw-010": None,
    }


def test_dataset_filters():
    df = load_listings_df()
    assert _ids(search_listings({"region": "강남구"}, df)) == ["gw-001"]
    assert _ids(search_listings({"subway_station": "신촌역"}, df)) == ["gw-002"]
    assert _ids(search_listings({"university": "고려대학교"}, df)) == ["gw-007", "gw-009"]
    assert _ids(search_listings({"promotion": "discount"}, df)) == ["gw-001", "gw-005", "gw-009"]
    assert _ids(search_listings({"availability": "urgent"}, df)) == ["gw-005", "gw-002"]
    assert _ids(search_listings({"availability": "many_rooms"}, df)) == ["gw-004", "gw-008"]


def test_filters_compose_with_and():
    df = load_listings_df()
    out = search_listings({"region": "성북구", "promotion": "discount"}, df)
    assert _ids(out) == ["gw-009"]
    assert search_listings({"region": "강남구", "university": "고려대학교"}, df) == []


def test_promotion_filter_requires_marketing():
    records = [_record("plain"), _record("promo", marketing={"promotion_type": "early_bird"})]
    assert _ids(query(records, {"promotion": "early_bird"})) == ["promo"]


def test_query_does_not_mutate_input():
    records = _scenario_records()
    before = copy.deepcopy(records)
    query(records, {"sort": "availability", "search_term": "house"})
    assert records == before


def test_empty_input_returns_empty():
    assert query([], {"search_term": "anything"}) == []


def test_unknown_sort_falls_back_to_rating():
    assert normalize_criteria({"sort": "random"})["sort"] == "rating"
    out = query(_scenario_records(), {"sort": "random"})
    assert _ids(out) == ["r1", "r2"]


def test_strict_criteria_rejects_unknown_values():
    with pytest.raises(InvalidCriteriaError):
        normalize_criteria({"sort": "random"}, strict=True)
    with pytest.raises(InvalidCriteriaError):
        normalize_criteria({"availability": "plenty"}, strict=True)
    with pytest.raises(InvalidCriteriaError):
        normalize_criteria({"price_range": {"min": 500000, "max": 100}}, strict=True)
    with pytest.raises(InvalidCriteriaError):
        normalize_criteria({"colour": "blue"}, strict=True)


def test_run_query_pipeline_shape():
    out = run_query_pipeline({"subway_station": "강남역"})
    assert set(out) == {"criteria", "summary", "stats", "cards", "results"}
    assert _ids(out["results"]) == ["gw-001"]
    assert out["stats"]["result_count"] == 1
    assert out["cards"][0]["id"] == "gw-001"


def test_run_query_pipeline_parses_free_text():
    out = run_query_pipeline(query="신촌역 근처")
    assert out["criteria"]["subway_station"] == "신촌역"
    assert _ids(out["results"]) == ["gw-002"]


def test_explicit_criteria_override_parsed_query():
    out = run_query_pipeline({"subway_station": "강남역"}, query="신촌역 근처")
    assert out["criteria"]["subway_station"] == "강남역"
    assert _ids(out["results"]) == ["gw-001"]


def test_mutating_results_does_not_leak_into_dataset():
    out = run_query_pipeline({"subway_station": "강남역"})
    out["results"][0]["tags"].append("오염")
    out["results"][0]["marketing"]["promotion_type"] = "early_bird"
    df = load_listings_df()
    assert search_listings({"search_term": "오염"}, df) == []
    assert _ids(search_listings({"promotion": "discount"}, df)) == ["gw-001", "gw-005", "gw-009"]
    assert search_listings({"subway_station": "강남역"}, df)[0]["marketing"]["promotion_type"] == "discount"


def test_short_free_text_falls_through_to_search_term():
    out = run_query_pipeline(query="서울")
    assert out["criteria"]["subway_station"] == "all"
    assert out["criteria"]["search_term"] == "서울"
    assert len(out["results"]) == 10

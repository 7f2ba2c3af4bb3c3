from roomfinder.data_loader import listings_to_df
from roomfinder.parsing import rule_based_parse


def _sample_listings_df():
    return listings_to_df(
        [
            {
                "id": "a",
                "subway_station": "강남역",
                "nearby_universities": [],
            },
            {
                "id": "b",
                "subway_station": "신촌역",
                "nearby_universities": ["연세대학교", "서강대학교"],
            },
            {
                "id": "c",
                "subway_station": "서울대입구역",
                "nearby_universities": ["서울대학교"],
            },
        ]
    )


def test_station_price_and_promotion():
    c = rule_based_parse("강남역 40만원 이하 할인", listings_df=_sample_listings_df())
    assert c["subway_station"] == "강남역"
    assert c["price_range"] == {"min": 0.0, "max": 400000.0}
    assert c["promotion"] == "discount"
    assert "search_term" not in c


def test_university_alias_availability_and_sort():
    c = rule_based_parse("연세대 근처 공실예정 평점순", listings_df=_sample_listings_df())
    assert c["university"] == "연세대학교"
    assert c["availability"] == "scheduled_vacancy"
    assert c["sort"] == "rating"
    assert "subway_station" not in c


def test_station_text_not_reused_for_university():
    c = rule_based_parse("서울대입구역 가성비", listings_df=_sample_listings_df())
    assert c["subway_station"] == "서울대입구역"
    assert "university" not in c


def test_region_min_price_and_free_deposit():
    c = rule_based_parse("성북구 50만원 이상 보증금 무료", listings_df=_sample_listings_df())
    assert c["region"] == "성북구"
    assert c["price_range"] == {"min": 500000.0, "max": None}
    assert c["promotion"] == "free_deposit"


def test_sort_keyword_is_not_a_filter():
    c = rule_based_parse("할인순", listings_df=_sample_listings_df())
    assert c == {"sort": "discount"}


def test_english_budget():
    c = rule_based_parse("room under 350,000", listings_df=_sample_listings_df())
    assert c["price_range"]["max"] == 350000.0


def test_unstructured_query_becomes_search_term():
    c = rule_based_parse("  조용한  ", listings_df=_sample_listings_df())
    assert c == {"search_term": "조용한"}


def test_fragment_of_a_name_is_not_a_station_or_university():
    df = _sample_listings_df()
    assert rule_based_parse("서울", listings_df=df) == {"search_term": "서울"}
    assert rule_based_parse("입구", listings_df=df) == {"search_term": "입구"}
    assert rule_based_parse("대학교", listings_df=df) == {"search_term": "대학교"}

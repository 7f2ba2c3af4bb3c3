from roomfinder.data_loader import get_listing, load_listings_df
from roomfinder.format import (
    availability_status,
    available_rooms_from_df,
    format_price,
    make_listing_card,
    promotion_badge,
    room_status_text,
)


def test_format_price():
    assert format_price(350000) == "350,000원"
    assert format_price(0) == "0원"
    assert format_price(None) == "N/A"


def test_availability_status_labels():
    assert availability_status({"available_rooms": 0, "scheduled_vacancy_rooms": 0}) == "마감"
    assert availability_status({"available_rooms": 0, "scheduled_vacancy_rooms": 2}) == "공실예정"
    assert availability_status({"available_rooms": 2, "occupancy_rate": 10}) == "마감임박"
    assert availability_status({"available_rooms": 5, "occupancy_rate": 20}) == "많은 빈방"
    assert availability_status({"available_rooms": 5, "occupancy_rate": 50}) == "입주가능"


def test_promotion_badge():
    badge = promotion_badge({"promotion": True, "promotion_type": "discount", "discount_rate": 0.2})
    assert badge["text"] == "20% 할인"
    assert promotion_badge({"promotion": True, "promotion_type": "free_deposit"})["text"] == "보증금 무료"
    assert promotion_badge({"promotion": False, "promotion_type": "discount"}) is None
    assert promotion_badge(None) is None


def test_room_status_text():
    assert room_status_text("reserved") == "예약됨"
    assert room_status_text("unknown") == "알 수 없음"


def test_listing_card_truncates_rooms_and_universities():
    card = make_listing_card(get_listing("gw-002"))
    assert card["universities"] == "연세대학교, 서강대학교 외"
    assert len(card["rooms"]) == 6
    assert card["more_rooms"] == 2
    assert card["price"] == "380,000원"
    assert card["original_price"] == "410,000원"
    assert card["promotion"]["urgency_level"] == "high"
    assert card["availability"] == "마감임박"
    assert card["cta"] == "/gosiwon/gw-002"


def test_listing_card_scheduled_vacancy():
    card = make_listing_card(get_listing("gw-003"))
    assert card["availability"] == "공실예정"
    assert card["scheduled_vacancy"] == "2개 공실예정"
    assert "공실예정 방 사전예약 15% 할인" in card["notes"]
    dates = [r["expected_vacancy_date"] for r in card["rooms"] if r["status"] == "scheduled_vacancy"]
    assert dates == ["2026-11-15", "2026-12-01"]


def test_listing_card_without_marketing():
    card = make_listing_card(get_listing("gw-006"))
    assert card["availability"] == "마감"
    assert card["promotion"] is None
    assert card["original_price"] is None
    assert card["notes"] == []


def test_available_rooms_from_df():
    rooms = available_rooms_from_df(load_listings_df())
    assert len(rooms) == 34
    assert {r["gosiwon_id"] for r in rooms} == {
        "gw-001", "gw-002", "gw-004", "gw-005", "gw-007", "gw-008", "gw-009", "gw-010",
    }
    studio = next(r for r in rooms if r["gosiwon_id"] == "gw-004")
    assert studio["room_type"] == "원룸"
    assert studio["size"] == "3.0평"
    shared = next(r for r in rooms if r["gosiwon_id"] == "gw-010")
    assert shared["room_type"] == "공용실"


def test_discount_percent_rounds_half_up():
    badge = promotion_badge({"promotion": True, "promotion_type": "discount", "discount_rate": 0.125})
    assert badge["text"] == "13% 할인"

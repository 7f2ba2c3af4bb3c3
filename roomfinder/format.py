"""Formatting helpers for results -> card dictionaries."""

import math
from typing import Any, Dict, List, Optional

import pandas as pd

MAX_CARD_ROOMS = 6
MAX_CARD_UNIVERSITIES = 2

ROOM_STATUS_TEXT = {
    "available": "입주가능",
    "occupied": "입주중",
    "maintenance": "점검중",
    "reserved": "예약됨",
    "scheduled_vacancy": "공실예정",
}

ROOM_TYPE_TEXT = {
    "single": "1인실",
    "double": "2인실",
    "studio": "원룸",
}

PROMOTION_TEXT = {
    "free_deposit": "보증금 무료",
    "first_month_free": "첫달 무료",
    "referral_bonus": "추천인 보너스",
    "early_bird": "얼리버드 할인",
}


def format_price(val) -> str:
    """Format whole won with thousands separators, e.g. ``350,000원``."""
    if val is None or pd.isna(val):
        return "N/A"
    return f"{int(val):,}원"


def _percent(rate) -> int:
    # half-up, not banker's rounding
    return int(math.floor(float(rate or 0) * 100 + 0.5))


def _count(row, key: str) -> int:
    v = row.get(key)
    if v is None or pd.isna(v):
        return 0
    return int(v)


def availability_status(row) -> str:
    available = _count(row, "available_rooms")
    scheduled = _count(row, "scheduled_vacancy_rooms")
    occupancy = _count(row, "occupancy_rate")
    if available == 0 and scheduled == 0:
        return "마감"
    if available == 0:
        return "공실예정"
    if available <= 2:
        return "마감임박"
    if occupancy <= 30:
        return "많은 빈방"
    return "입주가능"


def promotion_badge(marketing: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not isinstance(marketing, dict) or not marketing.get("promotion"):
        return None
    promotion_type = marketing.get("promotion_type")
    if promotion_type == "discount":
        text = f"{_percent(marketing.get('discount_rate'))}% 할인"
    else:
        text = PROMOTION_TEXT.get(promotion_type) or marketing.get("promotion_description") or "프로모션"
    return {
        "type": promotion_type,
        "text": text,
        "urgency_level": marketing.get("urgency_level"),
    }


def scheduled_vacancy_badge(row) -> Optional[str]:
    scheduled = _count(row, "scheduled_vacancy_rooms")
    if scheduled == 0:
        return None
    return f"{scheduled}개 공실예정"


def room_status_text(status: str) -> str:
    return ROOM_STATUS_TEXT.get(status, "알 수 없음")


def _room_entry(room: Dict[str, Any]) -> Dict[str, Any]:
    vacancy = room.get("scheduled_vacancy") or {}
    return {
        "id": room.get("id"),
        "number": room.get("number"),
        "status": room.get("status"),
        "status_text": room_status_text(room.get("status")),
        "expected_vacancy_date": vacancy.get("expected_date"),
    }


def make_listing_card(row) -> dict:
    # row can be a Series or mapping
    marketing = row.get("marketing")
    if not isinstance(marketing, dict):
        marketing = None
    universities = list(row.get("nearby_universities") or [])
    rooms = list(row.get("rooms") or [])
    images = list(row.get("images") or [])

    universities_text = ", ".join(universities[:MAX_CARD_UNIVERSITIES])
    if len(universities) > MAX_CARD_UNIVERSITIES:
        universities_text += " 외"

    notes = []
    if marketing and marketing.get("limited_time"):
        notes.append("한정 시간 특가")
    svp = (marketing or {}).get("scheduled_vacancy_promotion") or {}
    if svp.get("enabled"):
        notes.append(f"공실예정 방 사전예약 {_percent(svp.get('discount_rate'))}% 할인")

    original_price = marketing.get("original_price") if marketing else None

    card = {
        "id": str(row.get("id")),
        "title": str(row.get("name") or ""),
        "location": str(row.get("location") or ""),
        "image": images[0] if images else "/placeholder-image.jpg",
        "images": images,
        "availability": availability_status(row),
        "promotion": promotion_badge(marketing),
        "scheduled_vacancy": scheduled_vacancy_badge(row),
        "rating": float(row.get("rating") or 0.0),
        "review_count": _count(row, "review_count"),
        "available_rooms": _count(row, "available_rooms"),
        "scheduled_vacancy_rooms": _count(row, "scheduled_vacancy_rooms"),
        "total_rooms": _count(row, "total_rooms"),
        "occupancy_rate": _count(row, "occupancy_rate"),
        "subway_station": row.get("subway_station"),
        "walking_minutes": _count(row, "walking_minutes"),
        "universities": universities_text,
        "price": format_price(row.get("price")),
        "original_price": format_price(original_price) if original_price else None,
        "deposit": format_price(row.get("deposit")),
        "deposit_waived": bool(marketing and marketing.get("promotion_type") == "free_deposit"),
        "notes": notes,
        "rooms": [_room_entry(r) for r in rooms[:MAX_CARD_ROOMS]],
        "more_rooms": max(0, len(rooms) - MAX_CARD_ROOMS),
        "cta": f"/gosiwon/{row.get('id')}",
    }
    return card


def results_to_cards(df):
    return [make_listing_card(row) for _, row in df.iterrows()]


def available_rooms_from_df(df) -> List[Dict[str, Any]]:
    """Flatten every currently available room across listings."""
    out = []
    for _, row in df.iterrows():
        images = list(row.get("images") or [])
        for room in row.get("rooms") or []:
            if room.get("status") != "available":
                continue
            out.append(
                {
                    "id": room.get("id"),
                    "gosiwon_id": str(row.get("id")),
                    "gosiwon_name": str(row.get("name") or ""),
                    "gosiwon_location": str(row.get("location") or ""),
                    "gosiwon_rating": float(row.get("rating") or 0.0),
                    "gosiwon_image": images[0] if images else "/placeholder-image.jpg",
                    "room_type": ROOM_TYPE_TEXT.get(room.get("type"), "공용실"),
                    "size": f"{room.get('area')}평",
                    "price": int(room.get("price") or 0),
                    "deposit": int(room.get("deposit") or 0),
                    "facilities": list(room.get("facilities") or []),
                    "cta": f"/gosiwon/{row.get('id')}",
                }
            )
    return out

"""Static mock dataset of gosiwon listings and the filter options offered to users."""

from typing import Any, Dict, List, Optional, Sequence

from .config import ALL_OPTION

_ROOM_STATUS_CODES = {
    "A": "available",
    "O": "occupied",
    "M": "maintenance",
    "R": "reserved",
    "S": "scheduled_vacancy",
}


def _rooms(
    listing_id: str,
    layout: str,
    price: int,
    deposit: int,
    area: float = 2.0,
    room_type: str = "single",
    facilities: Sequence[str] = ("침대", "책상", "옷장"),
    vacancy_dates: Sequence[str] = (),
) -> List[Dict[str, Any]]:
    """Build a room inventory from a status layout string such as ``"AAOS"``.

    Scheduled-vacancy rooms consume ``vacancy_dates`` in order.
    """
    rooms = []
    dates = list(vacancy_dates)
    for i, code in enumerate(layout, start=1):
        status = _ROOM_STATUS_CODES[code]
        room: Dict[str, Any] = {
            "id": f"{listing_id}-r{i:02d}",
            "number": f"{100 + i}",
            "type": room_type,
            "area": area,
            "price": price,
            "deposit": deposit,
            "facilities": list(facilities),
            "status": status,
        }
        if status == "scheduled_vacancy" and dates:
            room["scheduled_vacancy"] = {"expected_date": dates.pop(0)}
        rooms.append(room)
    return rooms


def _images(listing_id: str, count: int = 3) -> List[str]:
    return [f"/images/gosiwon/{listing_id}-{n}.jpg" for n in range(1, count + 1)]


MOCK_LISTINGS: List[Dict[str, Any]] = [
    {
        "id": "gw-001",
        "name": "강남 스터디 고시원",
        "location": "서울 강남구 역삼동",
        "tags": ["역세권", "신축", "스터디룸"],
        "images": _images("gw-001"),
        "facilities": ["WiFi", "에어컨", "주방", "세탁기"],
        "subway_station": "강남역",
        "walking_minutes": 3,
        "bus_stop_minutes": 2,
        "nearby_universities": [],
        "price": 450000,
        "deposit": 500000,
        "rating": 4.7,
        "review_count": 128,
        "rooms": _rooms(
            "gw-001",
            "AAAAOOOSOO",
            price=450000,
            deposit=500000,
            area=2.5,
            vacancy_dates=["2026-11-30"],
        ),
        "marketing": {
            "promotion": True,
            "promotion_type": "discount",
            "promotion_description": "오픈 기념 10% 할인",
            "discount_rate": 0.1,
            "urgency_level": "medium",
            "limited_time": True,
            "original_price": 500000,
        },
    },
    {
        "id": "gw-002",
        "name": "신촌 캠퍼스 하우스",
        "location": "서울 서대문구 창천동",
        "tags": ["대학가", "여성전용층", "조용한"],
        "images": _images("gw-002"),
        "facilities": ["WiFi", "에어컨", "주방"],
        "subway_station": "신촌역",
        "walking_minutes": 5,
        "bus_stop_minutes": 3,
        "nearby_universities": ["연세대학교", "서강대학교", "이화여자대학교"],
        "price": 380000,
        "deposit": 300000,
        "rating": 4.5,
        "review_count": 96,
        "rooms": _rooms("gw-002", "AOOOOOOO", price=380000, deposit=300000),
        "marketing": {
            "promotion": True,
            "promotion_type": "early_bird",
            "promotion_description": "학기 시작 전 얼리버드",
            "discount_rate": 0.08,
            "urgency_level": "high",
            "limited_time": True,
            "original_price": 410000,
        },
    },
    {
        "id": "gw-003",
        "name": "관악 리빙텔",
        "location": "서울 관악구 봉천동",
        "tags": ["가성비", "고시생", "24시간 보안"],
        "images": _images("gw-003"),
        "facilities": ["WiFi", "에어컨"],
        "subway_station": "서울대입구역",
        "walking_minutes": 7,
        "bus_stop_minutes": 1,
        "nearby_universities": ["서울대학교"],
        "price": 300000,
        "deposit": 200000,
        "rating": 4.2,
        "review_count": 57,
        "rooms": _rooms(
            "gw-003",
            "OOOOSS",
            price=300000,
            deposit=200000,
            area=1.8,
            vacancy_dates=["2026-11-15", "2026-12-01"],
        ),
        "marketing": {
            "promotion": True,
            "promotion_type": "first_month_free",
            "promotion_description": "첫달 월세 무료",
            "discount_rate": 0.0,
            "urgency_level": "low",
            "limited_time": False,
            "scheduled_vacancy_promotion": {"enabled": True, "discount_rate": 0.15},
        },
    },
    {
        "id": "gw-004",
        "name": "홍대 아트 고시텔",
        "location": "서울 마포구 서교동",
        "tags": ["역세권", "감성 인테리어", "개별 화장실"],
        "images": _images("gw-004"),
        "facilities": ["WiFi", "에어컨", "주방", "개별 화장실"],
        "subway_station": "홍대입구역",
        "walking_minutes": 4,
        "bus_stop_minutes": 2,
        "nearby_universities": ["홍익대학교"],
        "price": 420000,
        "deposit": 0,
        "rating": 4.8,
        "review_count": 211,
        "rooms": _rooms(
            "gw-004",
            "AAAAAAOOAA",
            price=420000,
            deposit=0,
            area=3.0,
            room_type="studio",
            facilities=("침대", "책상", "냉장고", "개별 화장실"),
        ),
        "marketing": {
            "promotion": True,
            "promotion_type": "free_deposit",
            "promotion_description": "보증금 없이 입주",
            "discount_rate": 0.0,
            "urgency_level": "low",
            "limited_time": False,
        },
    },
    {
        "id": "gw-005",
        "name": "건대 프리미엄 원룸텔",
        "location": "서울 광진구 화양동",
        "tags": ["프리미엄", "신축", "헬스장"],
        "images": _images("gw-005"),
        "facilities": ["WiFi", "에어컨", "주방", "헬스장"],
        "subway_station": "건대입구역",
        "walking_minutes": 6,
        "bus_stop_minutes": 4,
        "nearby_universities": ["건국대학교", "세종대학교"],
        "price": 550000,
        "deposit": 1000000,
        "rating": 4.6,
        "review_count": 142,
        "rooms": _rooms(
            "gw-005",
            "AAAOOOOM",
            price=550000,
            deposit=1000000,
            area=3.5,
            room_type="studio",
            facilities=("침대", "책상", "냉장고", "세탁기", "개별 화장실"),
        ),
        "marketing": {
            "promotion": True,
            "promotion_type": "discount",
            "promotion_description": "장기계약 20% 할인",
            "discount_rate": 0.2,
            "urgency_level": "high",
            "limited_time": True,
            "original_price": 690000,
        },
    },
    {
        "id": "gw-006",
        "name": "노량진 합격 고시원",
        "location": "서울 동작구 노량진동",
        "tags": ["고시생", "독서실", "가성비"],
        "images": _images("gw-006", 2),
        "facilities": ["WiFi", "독서실"],
        "subway_station": "노량진역",
        "walking_minutes": 2,
        "bus_stop_minutes": 1,
        "nearby_universities": ["중앙대학교"],
        "price": 280000,
        "deposit": 100000,
        "rating": 3.9,
        "review_count": 64,
        "rooms": _rooms("gw-006", "OOOOOOOO", price=280000, deposit=100000, area=1.5),
    },
    {
        "id": "gw-007",
        "name": "성신 여성전용 고시원",
        "location": "서울 성북구 동선동",
        "tags": ["여성전용", "안심 귀가", "대학가"],
        "images": _images("gw-007"),
        "facilities": ["WiFi", "에어컨", "주방"],
        "subway_station": "성신여대입구역",
        "walking_minutes": 4,
        "bus_stop_minutes": 2,
        "nearby_universities": ["성신여자대학교", "고려대학교"],
        "price": 350000,
        "deposit": 300000,
        "rating": 4.4,
        "review_count": 73,
        "rooms": _rooms("gw-007", "AAOOORO", price=350000, deposit=300000),
        "marketing": {
            "promotion": True,
            "promotion_type": "referral_bonus",
            "promotion_description": "친구 추천 시 5만원 적립",
            "discount_rate": 0.0,
            "urgency_level": "medium",
            "limited_time": False,
        },
    },
    {
        "id": "gw-008",
        "name": "서초 비즈니스 고시텔",
        "location": "서울 서초구 서초동",
        "tags": ["직장인", "역세권", "조용한"],
        "images": _images("gw-008"),
        "facilities": ["WiFi", "에어컨", "주방", "라운지"],
        "subway_station": "교대역",
        "walking_minutes": 5,
        "bus_stop_minutes": 3,
        "nearby_universities": [],
        "price": 600000,
        "deposit": 1000000,
        "rating": 4.1,
        "review_count": 38,
        "rooms": _rooms(
            "gw-008",
            "AAAAAAAAO",
            price=600000,
            deposit=1000000,
            area=3.2,
            room_type="studio",
        ),
    },
    {
        "id": "gw-009",
        "name": "안암 캠퍼스 리빙",
        "location": "서울 성북구 안암동",
        "tags": ["대학가", "가성비", "공용 라운지"],
        "images": _images("gw-009"),
        "facilities": ["WiFi", "에어컨", "주방"],
        "subway_station": "안암역",
        "walking_minutes": 3,
        "bus_stop_minutes": 2,
        "nearby_universities": ["고려대학교"],
        "price": 400000,
        "deposit": 300000,
        "rating": 4.3,
        "review_count": 89,
        "rooms": _rooms(
            "gw-009",
            "AAAOOOOOSO",
            price=400000,
            deposit=300000,
            room_type="double",
            area=4.0,
            vacancy_dates=["2026-12-20"],
        ),
        "marketing": {
            "promotion": True,
            "promotion_type": "discount",
            "promotion_description": "재학생 5% 할인",
            "discount_rate": 0.05,
            "urgency_level": "low",
            "limited_time": False,
            "original_price": 420000,
        },
    },
    {
        "id": "gw-010",
        "name": "회기 스튜디오",
        "location": "서울 동대문구 회기동",
        "tags": ["대학가", "공용 주방", "밝은 채광"],
        "images": _images("gw-010"),
        "facilities": ["WiFi", "주방"],
        "subway_station": "회기역",
        "walking_minutes": 6,
        "bus_stop_minutes": 3,
        "nearby_universities": ["경희대학교", "한국외국어대학교"],
        "price": 330000,
        "deposit": 200000,
        "rating": 4.0,
        "review_count": 45,
        "rooms": _rooms(
            "gw-010",
            "AAAAAOOOOO",
            price=330000,
            deposit=200000,
            room_type="shared",
            area=2.2,
        ),
    },
]

LOCATIONS: List[str] = [
    ALL_OPTION,
    "강남구",
    "서초구",
    "관악구",
    "마포구",
    "서대문구",
    "동작구",
    "성북구",
    "광진구",
    "동대문구",
]


def _unique_in_order(values) -> List[str]:
    seen: List[str] = []
    for v in values:
        if v and v not in seen:
            seen.append(v)
    return seen


SUBWAY_STATIONS: List[str] = [ALL_OPTION] + _unique_in_order(
    listing["subway_station"] for listing in MOCK_LISTINGS
)

UNIVERSITIES: List[str] = [ALL_OPTION] + _unique_in_order(
    uni for listing in MOCK_LISTINGS for uni in listing["nearby_universities"]
)

# max=None means no upper bound
PRICE_RANGES: List[Dict[str, Optional[Any]]] = [
    {"label": "전체", "min": 0, "max": None},
    {"label": "30만원 이하", "min": 0, "max": 300000},
    {"label": "30~40만원", "min": 300000, "max": 400000},
    {"label": "40~50만원", "min": 400000, "max": 500000},
    {"label": "50만원 이상", "min": 500000, "max": None},
]

PROMOTION_TYPES: List[str] = [
    "discount",
    "free_deposit",
    "first_month_free",
    "referral_bonus",
    "early_bird",
]

AVAILABILITY_CATEGORIES: List[str] = [
    "many_rooms",
    "few_rooms",
    "scheduled_vacancy",
    "urgent",
]

SORT_STRATEGIES: List[str] = ["rating", "availability", "discount", "urgency"]

"""Normalize the mock listing table; provide cached datasets."""

from __future__ import annotations

import copy
import math
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from .exceptions import ListingNotFoundError
from .logging import get_logger
from .mock_data import MOCK_LISTINGS

logger = get_logger(__name__)

ROOM_STATUSES = ("available", "occupied", "maintenance", "reserved", "scheduled_vacancy")
URGENCY_LEVELS = ("low", "medium", "high")

# columns expected by the rest of the package
LISTING_COLUMNS = [
    "id",
    "name",
    "location",
    "tags",
    "images",
    "facilities",
    "subway_station",
    "walking_minutes",
    "bus_stop_minutes",
    "nearby_universities",
    "price",
    "deposit",
    "rating",
    "review_count",
    "rooms",
    "available_rooms",
    "occupied_rooms",
    "scheduled_vacancy_rooms",
    "total_rooms",
    "occupancy_rate",
    "marketing",
    "promotion_type",
    "discount_rate",
    "urgency_level",
]


def _to_int(val, default: int = 0) -> int:
    if val is None:
        return default
    try:
        if isinstance(val, float) and math.isnan(val):
            return default
        return int(val)
    except (TypeError, ValueError):
        return default


def _to_float(val, default: float = 0.0) -> float:
    if val is None:
        return default
    try:
        v = float(val)
    except (TypeError, ValueError):
        return default
    return default if math.isnan(v) else v


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def _str_list(val) -> List[str]:
    if not val:
        return []
    if isinstance(val, str):
        return [val]
    return [str(v) for v in val if v is not None]


def occupancy_rate(occupied: int, total: int) -> int:
    """Integer percentage of occupied rooms, rounded half-up; 0 for an empty inventory."""
    if total <= 0:
        return 0
    return int(math.floor(occupied * 100.0 / total + 0.5))


def normalize_room(raw: Dict[str, Any], listing_id: str = "", index: int = 0) -> Dict[str, Any]:
    status = str(raw.get("status") or "").lower()
    if status not in ROOM_STATUSES:
        # unrecognized status counts towards the total only
        status = "unknown"
    room = {
        "id": str(raw.get("id") or f"{listing_id}-r{index + 1:02d}"),
        "number": str(raw.get("number") or index + 1),
        "type": raw.get("type") or "single",
        "area": _to_float(raw.get("area")),
        "price": _to_int(raw.get("price")),
        "deposit": _to_int(raw.get("deposit")),
        "facilities": _str_list(raw.get("facilities")),
        "status": status,
        "scheduled_vacancy": None,
    }
    vacancy = raw.get("scheduled_vacancy")
    if isinstance(vacancy, dict) and vacancy.get("expected_date"):
        room["scheduled_vacancy"] = {"expected_date": str(vacancy["expected_date"])}
    return room


def summarize_rooms(rooms: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Aggregate room counts from a room inventory.

    Scheduled-vacancy rooms are still occupied, so they count towards
    ``occupied_rooms`` as well as ``scheduled_vacancy_rooms``.
    """
    counts = {
        "available_rooms": 0,
        "occupied_rooms": 0,
        "scheduled_vacancy_rooms": 0,
        "total_rooms": 0,
    }
    for room in rooms:
        counts["total_rooms"] += 1
        status = room.get("status")
        if status == "available":
            counts["available_rooms"] += 1
        elif status == "occupied":
            counts["occupied_rooms"] += 1
        elif status == "scheduled_vacancy":
            counts["occupied_rooms"] += 1
            counts["scheduled_vacancy_rooms"] += 1
    return counts


def _counts_from_room_status(status: Dict[str, Any]) -> Dict[str, int]:
    available = max(0, _to_int(status.get("available_rooms")))
    scheduled = max(0, _to_int(status.get("scheduled_vacancy_rooms")))
    total = max(_to_int(status.get("total_rooms")), available + scheduled)
    if status.get("occupied_rooms") is not None:
        occupied = min(max(0, _to_int(status.get("occupied_rooms"))), total - available)
    else:
        occupied = total - available
    return {
        "available_rooms": available,
        "occupied_rooms": occupied,
        "scheduled_vacancy_rooms": scheduled,
        "total_rooms": total,
    }


def normalize_marketing(raw: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict) or not raw:
        return None
    promotion_type = raw.get("promotion_type") or None
    urgency = raw.get("urgency_level")
    if urgency not in URGENCY_LEVELS:
        urgency = None
    original_price = raw.get("original_price")
    marketing = {
        "promotion": bool(raw.get("promotion", promotion_type is not None)),
        "promotion_type": promotion_type,
        "promotion_description": raw.get("promotion_description") or None,
        "discount_rate": _clamp(_to_float(raw.get("discount_rate")), 0.0, 1.0),
        "urgency_level": urgency,
        "limited_time": bool(raw.get("limited_time", False)),
        "original_price": _to_int(original_price) if original_price else None,
        "scheduled_vacancy_promotion": None,
    }
    svp = raw.get("scheduled_vacancy_promotion")
    if isinstance(svp, dict):
        marketing["scheduled_vacancy_promotion"] = {
            "enabled": bool(svp.get("enabled", False)),
            "discount_rate": _clamp(_to_float(svp.get("discount_rate")), 0.0, 1.0),
        }
    return marketing


def normalize_listing(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Return a flat listing record with every optional field defaulted.

    Room aggregates come from the room inventory when present, otherwise from
    a ``room_status`` block or top-level counts; the occupancy rate is always
    derived from them.
    """
    listing_id = str(raw.get("id", ""))
    rooms = [
        normalize_room(r, listing_id, i)
        for i, r in enumerate(raw.get("rooms") or [])
        if isinstance(r, dict)
    ]
    if rooms:
        counts = summarize_rooms(rooms)
    else:
        # already-normalized records carry their counts at the top level
        counts = _counts_from_room_status(raw.get("room_status") or raw)

    marketing = normalize_marketing(raw.get("marketing"))

    record = {
        "id": listing_id,
        "name": str(raw.get("name") or ""),
        "location": str(raw.get("location") or ""),
        "tags": _str_list(raw.get("tags")),
        "images": _str_list(raw.get("images")),
        "facilities": _str_list(raw.get("facilities")),
        "subway_station": raw.get("subway_station") or None,
        "walking_minutes": _to_int(raw.get("walking_minutes")),
        "bus_stop_minutes": _to_int(raw.get("bus_stop_minutes")),
        "nearby_universities": _str_list(raw.get("nearby_universities")),
        "price": _to_int(raw.get("price")),
        "deposit": _to_int(raw.get("deposit")),
        "rating": _clamp(_to_float(raw.get("rating")), 0.0, 5.0),
        "review_count": max(0, _to_int(raw.get("review_count"))),
        "rooms": rooms,
        "occupancy_rate": occupancy_rate(counts["occupied_rooms"], counts["total_rooms"]),
        "marketing": marketing,
        "promotion_type": marketing["promotion_type"] if marketing else None,
        "discount_rate": marketing["discount_rate"] if marketing else 0.0,
        "urgency_level": marketing["urgency_level"] if marketing else None,
    }
    record.update(counts)
    return record


def listings_to_df(records: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    """Normalize raw listing dicts into a DataFrame with ``LISTING_COLUMNS``."""
    rows = [normalize_listing(r) for r in records]
    if not rows:
        return pd.DataFrame(columns=LISTING_COLUMNS)
    return pd.DataFrame(rows, columns=LISTING_COLUMNS)


@lru_cache(maxsize=1)
def load_data() -> pd.DataFrame:
    """Load the static mock table once per process."""
    df = listings_to_df(MOCK_LISTINGS)
    logger.info(
        "Loaded %d listings with %d rooms", len(df), int(df["total_rooms"].sum())
    )
    return df


def load_listings_df() -> pd.DataFrame:
    """Alias used by the search pipeline, API and tests.

    Returns a copy so callers never touch the cached frame.
    """
    return load_data().copy()


def get_listing(listing_id: str, listings_df: Optional[pd.DataFrame] = None) -> Dict[str, Any]:
    """Return a single listing row as a dict or raise ListingNotFoundError."""
    df = load_listings_df() if listings_df is None else listings_df
    match = df[df["id"] == listing_id]
    if match.empty:
        raise ListingNotFoundError(f"Listing not found: {listing_id}")
    return {k: copy.deepcopy(v) for k, v in match.iloc[0].to_dict().items()}


if __name__ == "__main__":
    print(load_listings_df().head())

"""Text parsing utilities (rule-based free-text query -> search criteria)."""

import re
from typing import Any, Dict, List, Optional, Tuple

from rapidfuzz import fuzz, process

from .config import FUZZY_MATCH_THRESHOLD
from .data_loader import load_listings_df
from .mock_data import LOCATIONS

MAX_PRICE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*만\s*원?\s*(?:이하|까지|미만)")
MIN_PRICE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*만\s*원?\s*(?:이상|부터|초과)")
EN_MAX_PRICE_RE = re.compile(r"(?:under|below|up to)\s+₩?\s*([\d,]+)", re.IGNORECASE)

# checked in order; longer phrases first so "얼리버드 할인" is not read as "discount"
PROMOTION_KEYWORDS: List[Tuple[str, str]] = [
    ("보증금 무료", "free_deposit"),
    ("보증금없", "free_deposit"),
    ("첫달 무료", "first_month_free"),
    ("첫달무료", "first_month_free"),
    ("얼리버드", "early_bird"),
    ("추천인", "referral_bonus"),
    ("할인", "discount"),
]

AVAILABILITY_KEYWORDS: List[Tuple[str, str]] = [
    ("공실예정", "scheduled_vacancy"),
    ("마감임박", "few_rooms"),
    ("긴급", "urgent"),
    ("빈방 많은", "many_rooms"),
    ("많은 빈방", "many_rooms"),
]

SORT_KEYWORDS: List[Tuple[str, str]] = [
    ("평점순", "rating"),
    ("빈방순", "availability"),
    ("할인순", "discount"),
    ("긴급순", "urgency"),
]


def _fuzzy_pick(text: str, aliases: Dict[str, str]) -> Optional[Tuple[str, str]]:
    """Return (canonical, alias) of the best alias contained in ``text``."""
    if not text or not aliases:
        return None
    # an alias longer than the text would score 100 on any fragment of it
    aliases = {a: c for a, c in aliases.items() if len(a) <= len(text)}
    if not aliases:
        return None
    best = process.extractOne(
        text,
        list(aliases),
        scorer=fuzz.partial_ratio,
        score_cutoff=FUZZY_MATCH_THRESHOLD,
    )
    if not best:
        return None
    alias = best[0]
    return aliases[alias], alias


def _keyword(q: str, table: List[Tuple[str, str]]) -> Optional[str]:
    for phrase, value in table:
        if phrase in q:
            return value
    return None


def _man_won(num: str) -> float:
    return float(num) * 10000


def rule_based_parse(query: str, listings_df=None) -> Dict[str, Any]:
    """Extract criteria from a free-text query; only recognised keys are set."""
    q = query.strip()
    criteria: Dict[str, Any] = {}

    if listings_df is None:
        listings_df = load_listings_df()

    # stations first; matched text is removed so "서울대입구역" doesn't also hit "서울대"
    stations = {
        str(s): str(s) for s in listings_df["subway_station"].dropna().unique().tolist()
    }
    remaining = q
    picked = _fuzzy_pick(remaining, stations)
    if picked:
        criteria["subway_station"] = picked[0]
        remaining = remaining.replace(picked[1], " ")

    universities: Dict[str, str] = {}
    for unis in listings_df["nearby_universities"].tolist():
        for uni in unis or []:
            universities[uni] = uni
            short = uni.replace("학교", "")
            if short and short != uni:
                universities.setdefault(short, uni)
    picked = _fuzzy_pick(remaining, universities)
    if picked:
        criteria["university"] = picked[0]
        remaining = remaining.replace(picked[1], " ")

    regions = sorted((loc for loc in LOCATIONS[1:] if loc), key=len, reverse=True)
    for region in regions:
        if region in remaining:
            criteria["region"] = region
            break

    lo, hi = 0.0, None
    m = MAX_PRICE_RE.search(q)
    if m:
        hi = _man_won(m.group(1))
    else:
        m = EN_MAX_PRICE_RE.search(q)
        if m:
            hi = float(m.group(1).replace(",", ""))
    m = MIN_PRICE_RE.search(q)
    if m:
        lo = _man_won(m.group(1))
    if lo > 0 or hi is not None:
        criteria["price_range"] = {"min": lo, "max": hi}

    promotion = _keyword(q, PROMOTION_KEYWORDS)
    # "할인순" is a sort request, not a promotion filter
    if promotion == "discount" and "할인순" in q and q.count("할인") == 1:
        promotion = None
    if promotion:
        criteria["promotion"] = promotion

    availability = _keyword(q, AVAILABILITY_KEYWORDS)
    if availability == "urgent" and "긴급순" in q and q.count("긴급") == 1:
        availability = None
    if availability:
        criteria["availability"] = availability

    sort = _keyword(q, SORT_KEYWORDS)
    if sort:
        criteria["sort"] = sort

    if not criteria and q:
        criteria["search_term"] = q
    return criteria

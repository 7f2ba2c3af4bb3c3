"""Search, classification and ordering logic for gosiwon listings."""

import copy
import math
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from .config import ALL_OPTION
from .data_loader import listings_to_df, load_listings_df
from .exceptions import InvalidCriteriaError
from .format import results_to_cards
from .logging import get_logger
from .mock_data import AVAILABILITY_CATEGORIES, PROMOTION_TYPES, SORT_STRATEGIES
from .parsing import rule_based_parse
from .summary import compute_marketing_stats, generate_summary_from_df

logger = get_logger(__name__)

DEFAULT_SORT = "rating"

URGENCY_RANK = {"high": 2, "medium": 1, "low": 0}

SORT_COLUMNS = {
    "rating": "rating",
    "availability": "available_rooms",
    "discount": "discount_rate",
    "urgency": "_urgency_rank",
}


def default_criteria() -> Dict[str, Any]:
    """Criteria with every filter disabled and the default sort."""
    return {
        "search_term": "",
        "region": ALL_OPTION,
        "subway_station": ALL_OPTION,
        "university": ALL_OPTION,
        "price_range": {"min": 0, "max": None},
        "promotion": ALL_OPTION,
        "availability": ALL_OPTION,
        "sort": DEFAULT_SORT,
    }


def _normalize_price_range(value, strict: bool) -> Dict[str, Any]:
    if not value:
        return {"min": 0, "max": None}
    if not isinstance(value, dict):
        if strict:
            raise InvalidCriteriaError(f"price_range must be an object, got {value!r}")
        return {"min": 0, "max": None}
    try:
        lo = float(value.get("min") or 0)
        hi = value.get("max")
        hi = None if hi is None else float(hi)
    except (TypeError, ValueError):
        if strict:
            raise InvalidCriteriaError(f"price_range bounds must be numbers: {value!r}")
        return {"min": 0, "max": None}
    if hi is not None and math.isinf(hi):
        hi = None
    if strict and hi is not None and hi < lo:
        raise InvalidCriteriaError(f"price_range max {hi} is below min {lo}")
    return {"min": lo, "max": hi}


def normalize_criteria(criteria: Optional[Dict[str, Any]] = None, strict: bool = False) -> Dict[str, Any]:
    """Merge ``criteria`` over the defaults.

    In lenient mode unknown values are coerced: an unknown sort strategy falls
    back to ``rating`` while unknown promotion/availability selections are kept
    and simply match nothing. In strict mode they raise InvalidCriteriaError.
    """
    out = default_criteria()
    if not criteria:
        return out
    unknown = set(criteria) - set(out)
    if strict and unknown:
        raise InvalidCriteriaError(f"Unknown criteria keys: {sorted(unknown)}")

    for key in ("region", "subway_station", "university", "promotion", "availability"):
        val = criteria.get(key)
        if val not in (None, ""):
            out[key] = str(val)
    out["search_term"] = str(criteria.get("search_term") or "")
    out["price_range"] = _normalize_price_range(criteria.get("price_range"), strict)

    sort = criteria.get("sort") or DEFAULT_SORT
    if sort not in SORT_STRATEGIES:
        if strict:
            raise InvalidCriteriaError(f"Unknown sort strategy: {sort!r}")
        logger.debug("Unknown sort strategy %r, using %s", sort, DEFAULT_SORT)
        sort = DEFAULT_SORT
    out["sort"] = sort

    if strict:
        if out["promotion"] != ALL_OPTION and out["promotion"] not in PROMOTION_TYPES:
            raise InvalidCriteriaError(f"Unknown promotion type: {out['promotion']!r}")
        if (
            out["availability"] != ALL_OPTION
            and out["availability"] not in AVAILABILITY_CATEGORIES
        ):
            raise InvalidCriteriaError(
                f"Unknown availability category: {out['availability']!r}"
            )
    return out


def classify_availability(row) -> Optional[str]:
    """Assign exactly one availability category; first match wins.

    urgent -> few_rooms -> scheduled_vacancy -> many_rooms -> None
    """
    marketing = row.get("marketing")
    if isinstance(marketing, dict) and marketing.get("urgency_level") == "high":
        return "urgent"
    available = int(row.get("available_rooms") or 0)
    if 0 < available <= 2:
        return "few_rooms"
    if available == 0 and int(row.get("scheduled_vacancy_rooms") or 0) > 0:
        return "scheduled_vacancy"
    if int(row.get("occupancy_rate") or 0) <= 30:
        return "many_rooms"
    return None


def _matches_term(row, term: str) -> bool:
    if term in str(row["name"]).lower() or term in str(row["location"]).lower():
        return True
    return any(term in str(tag).lower() for tag in row["tags"] or [])


def filter_listings(criteria: Dict[str, Any], listings_df: pd.DataFrame) -> pd.DataFrame:
    """Apply every enabled filter (logical AND); order is preserved."""
    c = normalize_criteria(criteria)
    df = listings_df.copy()
    if df.empty:
        return df

    if c["search_term"]:
        term = c["search_term"].lower()
        df = df[df.apply(lambda row: _matches_term(row, term), axis=1).astype(bool)]
    if c["region"] != ALL_OPTION and not df.empty:
        df = df[df["location"].astype(str).str.contains(c["region"], regex=False)]
    if c["subway_station"] != ALL_OPTION and not df.empty:
        df = df[df["subway_station"] == c["subway_station"]]
    if c["university"] != ALL_OPTION and not df.empty:
        uni = c["university"]
        df = df[df["nearby_universities"].apply(lambda unis: uni in (unis or [])).astype(bool)]
    lo, hi = c["price_range"]["min"], c["price_range"]["max"]
    if (lo > 0 or hi is not None) and not df.empty:
        mask = df["price"] >= lo
        if hi is not None:
            mask &= df["price"] <= hi
        df = df[mask]
    if c["promotion"] != ALL_OPTION and not df.empty:
        df = df[df["marketing"].notna() & (df["promotion_type"] == c["promotion"])]
    if c["availability"] != ALL_OPTION and not df.empty:
        wanted = c["availability"]
        df = df[df.apply(lambda row: classify_availability(row) == wanted, axis=1).astype(bool)]
    return df


def sort_listings(df: pd.DataFrame, strategy: str = DEFAULT_SORT) -> pd.DataFrame:
    """Stable descending sort by the strategy's key; equal keys keep input order."""
    if strategy not in SORT_COLUMNS:
        strategy = DEFAULT_SORT
    if df.empty:
        return df
    df = df.copy()
    column = SORT_COLUMNS[strategy]
    if strategy == "urgency":
        df[column] = df["urgency_level"].map(URGENCY_RANK).fillna(-1)
    elif strategy == "discount":
        df[column] = df[column].fillna(0.0)
    df = df.sort_values(by=column, ascending=False, kind="stable")
    if column.startswith("_"):
        df = df.drop(columns=[column])
    return df


def _normalize_record_value(v: Any):
    # nested lists/dicts are shared with the cached frame
    if isinstance(v, (list, dict)):
        return copy.deepcopy(v)
    if v is None:
        return None
    try:
        if pd.isna(v):
            return None
    except (TypeError, ValueError):
        pass
    if hasattr(v, "item"):
        return v.item()
    return v


def to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Convert a listing frame to serializable dicts tagged with their availability category."""
    records = []
    for r in df.to_dict(orient="records"):
        nr = {k: _normalize_record_value(v) for k, v in r.items()}
        nr["availability_category"] = classify_availability(nr)
        records.append(nr)
    return records


def search_listings(criteria: Optional[Dict[str, Any]], listings_df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Filter and order listings, returning a list of serializable dict records."""
    c = normalize_criteria(criteria)
    ordered = sort_listings(filter_listings(c, listings_df), c["sort"])
    logger.debug("Search %s matched %d of %d listings", c, len(ordered), len(listings_df))
    return to_records(ordered)


def query(records: Iterable[Dict[str, Any]], criteria: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """Run the engine over raw listing dicts instead of the cached dataset."""
    return search_listings(criteria, listings_to_df(records))


def run_query_pipeline(
    criteria: Optional[Dict[str, Any]] = None,
    query: Optional[str] = None,
    strict: bool = False,
) -> Dict[str, Any]:
    """Run the full criteria -> search -> stats/summary -> cards pipeline.

    When a free-text ``query`` is given it is parsed first and any explicit
    ``criteria`` override the parsed values. The return value contains only
    JSON-serializable primitives.

    Returns a dict with keys: criteria, summary, stats, cards, results
    """
    listings_df = load_listings_df()

    merged: Dict[str, Any] = {}
    if query:
        merged.update(rule_based_parse(query, listings_df=listings_df))
    if criteria:
        merged.update(criteria)
    c = normalize_criteria(merged, strict=strict)

    results_df = sort_listings(filter_listings(c, listings_df), c["sort"])
    logger.info("Query matched %d listings (sort=%s)", len(results_df), c["sort"])

    return {
        "criteria": c,
        "summary": generate_summary_from_df(results_df, c),
        "stats": compute_marketing_stats(results_df),
        "cards": results_to_cards(results_df),
        "results": to_records(results_df),
    }

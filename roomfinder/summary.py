"""Derived statistics and short grounded summaries from filtered results."""

import math
from typing import Any, Dict

import pandas as pd

from .config import ALL_OPTION


def compute_marketing_stats(df: pd.DataFrame) -> Dict[str, int]:
    """Statistics the renderer shows above the result grid.

    Always recomputed from the filtered frame it is given.
    """
    n = len(df)
    if n == 0:
        return {
            "available_rooms": 0,
            "promotion_count": 0,
            "occupancy_rate": 0,
            "result_count": 0,
        }

    promotion_count = int(
        df["marketing"].apply(lambda m: isinstance(m, dict) and bool(m.get("promotion"))).sum()
    )
    mean_rate = float(df["occupancy_rate"].fillna(0).mean())
    return {
        "available_rooms": int(df["available_rooms"].fillna(0).sum()),
        "promotion_count": promotion_count,
        "occupancy_rate": int(math.floor(mean_rate + 0.5)),
        "result_count": n,
    }


def generate_summary_from_df(df: pd.DataFrame, criteria: Dict[str, Any]) -> str:
    n = len(df)
    if n == 0:
        return "검색 결과가 없습니다. 다른 검색어나 필터 조건을 시도해보세요."

    stats = compute_marketing_stats(df)
    parts = [f"총 {n}개의 고시원을 찾았습니다."]

    # rooms and promotions
    s2 = f"입주 가능한 빈방 {stats['available_rooms']}개"
    if stats["promotion_count"]:
        s2 += f", 프로모션 진행 중인 고시원 {stats['promotion_count']}곳"
    parts.append(s2 + ".")

    prices = df["price"].dropna()
    if not prices.empty:
        parts.append(
            f"월세 {int(prices.min()):,}원 ~ {int(prices.max()):,}원, 평균 입주율 {stats['occupancy_rate']}%."
        )

    stations = df["subway_station"].dropna()
    if not stations.empty and criteria.get("subway_station") in (None, "", ALL_OPTION):
        top_station = stations.value_counts().idxmax()
        parts.append(f"{top_station} 주변 매물이 가장 많습니다.")

    return " ".join(parts)

from __future__ import annotations

from typing import Any, Dict, List

from catalog_intel.services.aggregate import pct, round_half_up
from catalog_intel.services.reference import LIMITS, THRESHOLDS


def market_average(by_subcategory: Dict[str, Dict[str, int]], subcat: str, brand_count: int) -> int:
    if not brand_count:
        return 0
    total = sum((by_subcategory.get(subcat) or {}).values())
    return int(round_half_up(total / brand_count))


def brand_index(
    brands: Dict[str, Dict[str, Any]],
    by_subcategory: Dict[str, Dict[str, int]],
    slug: str,
    subcat: str,
) -> int:
    """100 = market average; above over-indexes, below under-indexes."""
    brand = brands.get(slug)
    if not brand:
        return 0
    avg = market_average(by_subcategory, subcat, len(brands))
    if avg == 0:
        return 0
    return int(round_half_up(brand["subcategories"].get(subcat, 0) / avg * 100))


def subcategory_leaders(
    brands: Dict[str, Dict[str, Any]],
    by_subcategory: Dict[str, Dict[str, int]],
    subcat: str,
) -> List[Dict[str, Any]]:
    rows = []
    for slug, count in (by_subcategory.get(subcat) or {}).items():
        b = brands.get(slug)
        rows.append({
            "brand": b["name"] if b else slug,
            "slug": slug,
            "count": count,
            "pct": pct(count, b["total"]) if b else 0.0,
        })
    return sorted(rows, key=lambda r: r["count"], reverse=True)


def top_subcategories(by_subcategory: Dict[str, Dict[str, int]], limit: int = LIMITS["top_subcategories"]) -> List[str]:
    totals = {subcat: sum(counts.values()) for subcat, counts in by_subcategory.items()}
    return [s for s, _ in sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:limit]]


def brand_profiles(
    brands: Dict[str, Dict[str, Any]],
    by_subcategory: Dict[str, Dict[str, int]],
) -> Dict[str, Dict[str, Any]]:
    """Rank by catalog size plus the subcategories each brand over- and under-indexes in."""
    ranked = sorted(brands.values(), key=lambda b: b["total"], reverse=True)
    ranks = {b["slug"]: i + 1 for i, b in enumerate(ranked)}
    n = LIMITS["profile_items"]

    out: Dict[str, Dict[str, Any]] = {}
    for slug, b in brands.items():
        rows = []
        for subcat, count in b["subcategories"].items():
            if subcat == "other":
                continue
            rows.append({
                "subcategory": subcat,
                "count": count,
                "index": brand_index(brands, by_subcategory, slug, subcat),
                "marketAverage": market_average(by_subcategory, subcat, len(brands)),
            })

        strengths = sorted(
            (r for r in rows if r["index"] > THRESHOLDS["strength_index"]),
            key=lambda r: r["index"],
            reverse=True,
        )[:n]
        gaps = sorted(
            (r for r in rows if r["index"] < THRESHOLDS["weak_index"] and r["marketAverage"] > THRESHOLDS["weak_market_average"]),
            key=lambda r: r["index"],
        )[:n]

        out[slug] = {"rank": ranks[slug], "strengths": strengths, "gaps": gaps}
    return out

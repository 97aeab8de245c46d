from __future__ import annotations

from typing import Any, Dict, List, Optional

from catalog_intel.services.reference import LIMITS, brand_name


def seen_date(p: Dict[str, Any]) -> Optional[str]:
    s = p.get("first_seen")
    if not s:
        return None
    return s.split("T")[0] or None


def sample_name(p: Dict[str, Any]) -> str:
    if p.get("product_name"):
        return p["product_name"]
    url = p.get("url") or ""
    if "/products/" in url:
        handle = url.split("/products/", 1)[1].split("?")[0]
        if handle:
            return handle
    return "Unknown"


def initial_load_dates(normalized: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Optional[str]]:
    """Earliest first_seen date per brand: the bulk import, not a launch."""
    out: Dict[str, Optional[str]] = {}
    for slug, records in normalized.items():
        dates = [d for d in (seen_date(p) for p in records) if d]
        out[slug] = min(dates) if dates else None
    return out


def extract_launches(normalized: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
    """
    Returns:
      recentLaunches: one entry per (date, brand) for the most recent launch dates,
        initial-load dates excluded
      launchVelocity: brand -> date -> count over every date, initial load included
    """
    initial = initial_load_dates(normalized)
    velocity: Dict[str, Dict[str, int]] = {}
    by_date_brand: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}

    for slug, records in normalized.items():
        counts: Dict[str, int] = {}
        for p in records:
            date = seen_date(p)
            if not date:
                continue
            counts[date] = counts.get(date, 0) + 1

            if date == initial[slug]:
                continue
            by_date_brand.setdefault(date, {}).setdefault(slug, []).append(p)

        velocity[slug] = {d: counts[d] for d in sorted(counts)}

    dates = sorted(by_date_brand, reverse=True)[: LIMITS["launch_dates"]]

    recent: List[Dict[str, Any]] = []
    for date in dates:
        for slug, products in by_date_brand[date].items():
            recent.append({
                "date": date,
                "brand": brand_name(slug),
                "brandSlug": slug,
                "count": len(products),
                "products": [
                    {
                        "name": sample_name(p),
                        "url": p["url"],
                        "category": p.get("category") or "other",
                        "gender": p.get("gender") or "unisex",
                    }
                    for p in products[: LIMITS["launch_samples"]]
                ],
            })

    # stable: equal (date, count) keeps brand feed order
    recent.sort(key=lambda e: e["count"], reverse=True)
    recent.sort(key=lambda e: e["date"], reverse=True)

    return {"recentLaunches": recent, "launchVelocity": velocity, "initialLoad": initial}


def launch_summary(
    velocity: Dict[str, Dict[str, int]],
    recent: List[Dict[str, Any]],
    initial: Dict[str, Optional[str]],
) -> Dict[str, Dict[str, Any]]:
    recent_counts: Dict[str, int] = {}
    for e in recent:
        recent_counts[e["brandSlug"]] = recent_counts.get(e["brandSlug"], 0) + e["count"]

    out: Dict[str, Dict[str, Any]] = {}
    for slug, by_date in velocity.items():
        first = initial.get(slug)
        after = {d: c for d, c in by_date.items() if d != first}

        peak_date, peak_count = None, 0
        for d, c in after.items():  # ascending, so the earliest date wins ties
            if c > peak_count:
                peak_date, peak_count = d, c

        out[slug] = {
            "initialLoad": first,
            "initialLoadCount": by_date.get(first, 0) if first else 0,
            "launchDays": len(after),
            "launches": sum(after.values()),
            "recentLaunches": recent_counts.get(slug, 0),
            "peakDate": peak_date,
            "peakCount": peak_count,
        }
    return out

from __future__ import annotations

from typing import Any, Dict, List

from catalog_intel.services.aggregate import round_half_up
from catalog_intel.services.reference import CATEGORY_ORDER, COLOR_ORDER


def mix_pct(count: float, total: float) -> float:
    if not total:
        return 0.0
    return round_half_up(count / total * 1000) / 10


def by_size(brands: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Brands with products, largest catalog first (ties keep feed order)."""
    return sorted((b for b in brands.values() if b["total"] > 0), key=lambda b: b["total"], reverse=True)


def category_mix(brands: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    rows = []
    for b in by_size(brands):
        row: Dict[str, Any] = {"brand": b["name"], "slug": b["slug"]}
        for cat in CATEGORY_ORDER:
            row[cat] = mix_pct(b["categories"].get(cat, 0), b["total"])
        rows.append(row)
    return rows


def color_mix(brands: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    rows = []
    for b in by_size(brands):
        colors = b["colors"]
        named_total = sum(colors.get(c, 0) for c in COLOR_ORDER)
        other_total = sum(colors.values()) - named_total

        row: Dict[str, Any] = {"brand": b["name"], "slug": b["slug"]}
        for c in COLOR_ORDER:
            row[c] = mix_pct(colors.get(c, 0), b["total"])
        row["other"] = mix_pct(other_total, b["total"])
        rows.append(row)
    return rows

from __future__ import annotations

import math
from collections import Counter
from typing import Any, Dict, List, Set

from catalog_intel.services.reference import brand_name


def round_half_up(x: float, places: int = 0) -> float:
    # dashboard figures round .5 up, not to even
    scale = 10 ** places
    return math.floor(x * scale + 0.5) / scale


def pct(n: float, d: float, places: int = 1) -> float:
    return round_half_up(n / d * 100.0, places) if d else 0.0


def share(n: float, d: float) -> float:
    """Unrounded percentage; n * 100 / d keeps exact boundaries exact (2/5 -> 40.0)."""
    return n * 100.0 / d if d else 0.0


def mean(xs: List[float]) -> float:
    return sum(xs) / len(xs) if xs else 0.0


def aggregate_brand(slug: str, records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    One pass over a brand's normalized records.

    Color depth is measured per style (product_name): the number of distinct
    color families each style ships in, averaged over styles with at least one color.
    """
    categories: Counter = Counter()
    subcategories: Counter = Counter()
    genders: Counter = Counter()
    colors: Counter = Counter()
    style_colors: Dict[str, Set[str]] = {}
    with_color = 0

    for p in records:
        categories[p["category"]] += 1
        subcategories[p["subcategory"]] += 1
        genders[p["gender"]] += 1

        family = p.get("color_family")
        if family:
            with_color += 1
            colors[family] += 1
            name = p.get("product_name")
            if name:
                style_colors.setdefault(name, set()).add(family)

    total = len(records)
    unique_styles = len(style_colors)
    total_colors = sum(len(s) for s in style_colors.values())
    avg_colors = round_half_up(total_colors / unique_styles, 1) if unique_styles else 0.0

    return {
        "name": brand_name(slug),
        "slug": slug,
        "total": total,
        "categories": dict(categories),
        "subcategories": dict(subcategories),
        "genders": dict(genders),
        "colors": dict(colors),
        "colorCoverage": pct(with_color, total),
        "avgColorsPerStyle": avg_colors,
        "uniqueStyles": unique_styles,
    }


def cross_tab(brands: Dict[str, Dict[str, Any]], field: str) -> Dict[str, Dict[str, int]]:
    """dimension value -> brand slug -> count"""
    out: Dict[str, Dict[str, int]] = {}
    for slug, b in brands.items():
        for key, count in b[field].items():
            out.setdefault(key, {})[slug] = count
    return out


def aggregate_brands(normalized: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
    brands = {slug: aggregate_brand(slug, records) for slug, records in normalized.items()}

    by_category = cross_tab(brands, "categories")
    by_subcategory = cross_tab(brands, "subcategories")

    return {
        "brands": brands,
        "byCategory": by_category,
        "bySubcategory": by_subcategory,
        "byColor": cross_tab(brands, "colors"),
        "totals": {
            "products": sum(b["total"] for b in brands.values()),
            "brands": len(brands),
            "categories": len(by_category),
            "subcategories": len(by_subcategory),
        },
    }

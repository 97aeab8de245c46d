from __future__ import annotations

from typing import Dict, Iterable, List


BRAND_NAMES: Dict[str, str] = {
    "vuori": "Vuori",
    "lululemon": "Lululemon",
    "alo": "Alo Yoga",
    "gymshark": "Gymshark",
    "outdoor_voices": "Outdoor Voices",
    "tenthousand": "Ten Thousand",
    "on_running": "On Running",
}

BRAND_ORDER: List[str] = ["gymshark", "on_running", "alo", "vuori", "lululemon", "outdoor_voices", "tenthousand"]

CATEGORY_ORDER: List[str] = ["bottoms", "tops", "outerwear", "dresses", "sports_bras", "accessories", "other"]

# named color buckets shown in the color mix; everything else rolls into "other"
COLOR_ORDER: List[str] = [
    "black", "white", "gray", "navy", "blue", "green", "khaki",
    "brown", "purple", "pink", "orange", "red", "yellow",
]

EARTH_TONES: List[str] = ["brown", "rust", "khaki", "green"]
NEUTRALS: List[str] = ["black", "white", "gray", "navy"]

HEAD_TO_HEAD_SUBCATEGORIES: List[str] = ["joggers", "leggings", "shorts", "hoodies", "tanks", "tees"]

DEFAULT_FOCUS_BRAND = "vuori"
DEFAULT_RIVALS: List[str] = ["lululemon", "alo"]

THRESHOLDS: Dict[str, float] = {
    "leader_index": 120,          # index vs market average, strict >
    "gap_competitor_volume": 20,  # competitors combined, >=
    "bottoms_focus_pct": 40,      # share of own catalog, strict >
    "launch_spike_pct": 5,        # recent launches as share of catalog, strict >
    "heather_multiple": 1.5,
    "gender_balance_ratio": 0.3,
    "gender_volume": 100,
    "alert_medium_multiple": 1.5,
    "alert_high_multiple": 2.0,
    "strength_index": 120,
    "weak_index": 80,
    "weak_market_average": 50,
}

LIMITS: Dict[str, int] = {
    "insights": 8,
    "leading": 5,
    "lagging": 4,
    "alerts": 5,
    "launch_dates": 14,
    "launch_samples": 10,
    "top_subcategories": 10,
    "profile_items": 3,
}


def brand_name(slug: str) -> str:
    return BRAND_NAMES.get(slug, slug)


def sort_brands(slugs: Iterable[str]) -> List[str]:
    """Known brands in BRAND_ORDER, then any others in the order given."""
    slugs = list(slugs)
    known = [s for s in BRAND_ORDER if s in slugs]
    return known + [s for s in slugs if s not in BRAND_ORDER]


def format_label(key: str) -> str:
    """sports_bras -> Sports Bras"""
    return " ".join(word[:1].upper() + word[1:] for word in key.split("_"))

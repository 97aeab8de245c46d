from __future__ import annotations

from typing import Any, Dict, List, Optional

from catalog_intel.services.aggregate import mean, round_half_up, share
from catalog_intel.services.reference import (
    EARTH_TONES,
    HEAD_TO_HEAD_SUBCATEGORIES,
    LIMITS,
    THRESHOLDS,
    format_label,
)


def empty_scorecard(focus: Optional[str]) -> Dict[str, Any]:
    return {"focusBrand": focus, "leading": [], "lagging": [], "alerts": [], "headToHead": {}}


def winner(focus_count: int, competitor_count: int) -> str:
    if focus_count > competitor_count:
        return "focus"
    if focus_count < competitor_count:
        return "competitor"
    return "tie"


def gender_ratio(b: Dict[str, Any]) -> float:
    w = b["genders"].get("womens", 0)
    m = b["genders"].get("mens", 0)
    hi = max(w, m)
    return min(w, m) / hi if hi else 0.0


def head_to_head(focus: Dict[str, Any], rival: Dict[str, Any]) -> List[Dict[str, Any]]:
    rows = []
    for subcat in HEAD_TO_HEAD_SUBCATEGORIES:
        fc = focus["subcategories"].get(subcat, 0)
        rc = rival["subcategories"].get(subcat, 0)
        rows.append({"category": format_label(subcat), "focus": fc, "competitor": rc, "winner": winner(fc, rc)})

    for label, key in (("Men's Products", "mens"), ("Women's Products", "womens")):
        fc = focus["genders"].get(key, 0)
        rc = rival["genders"].get(key, 0)
        rows.append({"category": label, "focus": fc, "competitor": rc, "winner": winner(fc, rc)})
    return rows


def generate_scorecard(
    brands: Dict[str, Dict[str, Any]],
    by_subcategory: Dict[str, Dict[str, int]],
    focus: str,
    rivals: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Leading / lagging / alerts for the focus brand plus head-to-head tables
    against each named rival. Competitor averages never include the focus brand.
    """
    f = brands.get(focus)
    if f is None or f["total"] == 0:
        return empty_scorecard(focus)

    leading: List[Dict[str, str]] = []
    lagging: List[Dict[str, str]] = []
    alerts: List[Dict[str, str]] = []

    others = [b for slug, b in brands.items() if slug != focus and b["total"] > 0]

    if others:
        # -------- HEATHER / PERFORMANCE FABRICS --------
        heather = share(f["colors"].get("heather", 0), f["total"])
        avg_heather = mean([share(b["colors"].get("heather", 0), b["total"]) for b in others])
        if heather > avg_heather * THRESHOLDS["heather_multiple"]:
            leading.append({
                "metric": "Performance Fabrics (Heather)",
                "value": f"{heather:.0f}% of products",
                "comparison": f"Industry avg: {avg_heather:.0f}%",
            })

        # -------- COLOR DEPTH --------
        styled = [b for b in others if b["uniqueStyles"] > 0]
        if styled:
            depth = f["avgColorsPerStyle"]
            avg_depth = mean([b["avgColorsPerStyle"] for b in styled])
            deepest = max(styled, key=lambda b: b["avgColorsPerStyle"])
            if depth >= avg_depth:
                leading.append({
                    "metric": "Color Depth",
                    "value": f"{depth:.1f} colors/style",
                    "comparison": f"+{depth - avg_depth:.1f} vs industry avg",
                })
            else:
                lagging.append({
                    "metric": "Color Depth",
                    "value": f"{depth:.1f} colors/style",
                    "comparison": f"{deepest['name']} has {deepest['avgColorsPerStyle']:.1f}",
                })

        # -------- EARTH TONES --------
        def earth(b: Dict[str, Any]) -> float:
            return share(sum(b["colors"].get(c, 0) for c in EARTH_TONES), b["total"])

        focus_earth = earth(f)
        avg_earth = mean([earth(b) for b in others])
        if focus_earth > avg_earth:
            leading.append({
                "metric": "Earth Tone Palette (CA Aesthetic)",
                "value": f"{focus_earth:.0f}% earth tones",
                "comparison": f"Industry avg: {avg_earth:.0f}%",
            })

    # -------- GENDER BALANCE --------
    w = f["genders"].get("womens", 0)
    m = f["genders"].get("mens", 0)
    volume = THRESHOLDS["gender_volume"]
    if w + m > volume:
        balance = gender_ratio(f)
        most_balanced = not any(
            gender_ratio(b) > balance
            for b in others
            if b["genders"].get("womens", 0) > volume and b["genders"].get("mens", 0) > volume
        )
        if balance >= THRESHOLDS["gender_balance_ratio"]:
            leading.append({
                "metric": "Gender Balance",
                "value": f"{int(round_half_up(share(w, w + m)))}% W / {int(round_half_up(share(m, w + m)))}% M",
                "comparison": "Most balanced lifestyle brand" if most_balanced else "Strong balance",
            })

    # -------- CATEGORY GAPS --------
    for subcat, counts in by_subcategory.items():
        if subcat == "other" or counts.get(focus, 0) > 0:
            continue
        total_others = sum(c for slug, c in counts.items() if slug != focus)
        if total_others >= THRESHOLDS["gap_competitor_volume"]:
            lagging.append({
                "metric": format_label(subcat),
                "value": "0 products",
                "comparison": f"Competitors have {total_others} products",
            })

    # -------- CATALOG SIZE ALERTS --------
    for b in others:
        if b["total"] > f["total"] * THRESHOLDS["alert_medium_multiple"]:
            alerts.append({
                "severity": "high" if b["total"] > f["total"] * THRESHOLDS["alert_high_multiple"] else "medium",
                "brand": b["slug"],
                "message": f"{b['name']} has {int(round_half_up(b['total'] / f['total']))}x {f['name']}'s catalog size",
            })

    # -------- HEAD-TO-HEAD --------
    h2h: Dict[str, List[Dict[str, Any]]] = {}
    for slug in rivals or []:
        r = brands.get(slug)
        if r is None or slug == focus:
            continue
        h2h[slug] = head_to_head(f, r)

    return {
        "focusBrand": focus,
        "leading": leading[: LIMITS["leading"]],
        "lagging": lagging[: LIMITS["lagging"]],
        "alerts": alerts[: LIMITS["alerts"]],
        "headToHead": h2h,
    }

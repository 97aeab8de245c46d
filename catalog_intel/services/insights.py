from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from catalog_intel.services.aggregate import mean, round_half_up, share
from catalog_intel.services.reference import EARTH_TONES, LIMITS, NEUTRALS, THRESHOLDS, format_label

Insight = Dict[str, Any]
Rule = Callable[[Dict[str, Any]], Optional[Insight]]


def build_context(
    aggregated: Dict[str, Any],
    launch_summary: Dict[str, Dict[str, Any]],
    focus: Optional[str] = None,
    rival: Optional[str] = None,
) -> Dict[str, Any]:
    """Read-only view shared by every rule."""
    brands = aggregated["brands"]
    focus_brand = brands.get(focus) if focus else None
    if rival == focus:
        rival = None
    if focus_brand is not None and focus_brand["total"] == 0:
        focus_brand = None

    return {
        "brands": brands,
        "byCategory": aggregated["byCategory"],
        "bySubcategory": aggregated["bySubcategory"],
        "totals": aggregated["totals"],
        "launchSummary": launch_summary,
        "focus": focus_brand,
        "rival": brands.get(rival) if rival else None,
    }


def insight(type_: str, metric: str, text: str, brand: Optional[str] = None, value: Optional[float] = None) -> Insight:
    out: Insight = {"type": type_, "metric": metric, "text": text}
    if brand is not None:
        out["brand"] = brand
    if value is not None:
        out["value"] = value
    return out


def stocked(ctx: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [b for b in ctx["brands"].values() if b["total"] > 0]


def competitors(ctx: Dict[str, Any]) -> List[Dict[str, Any]]:
    focus = ctx["focus"]
    return [b for b in stocked(ctx) if focus is None or b["slug"] != focus["slug"]]


def family_share(b: Dict[str, Any], families: List[str]) -> float:
    return share(sum(b["colors"].get(c, 0) for c in families), b["total"])


def whole(x: float) -> int:
    return int(round_half_up(x))


# -------- MARKET-WIDE RULES --------

def subcategory_leader(ctx: Dict[str, Any]) -> Optional[Insight]:
    brands = ctx["brands"]
    n = len(brands)
    best = None
    for b in brands.values():
        for subcat, count in b["subcategories"].items():
            if subcat == "other":
                continue
            avg = sum(ctx["bySubcategory"].get(subcat, {}).values()) / n
            index = share(count, avg)
            if best is None or index > best[0]:
                best = (index, b, subcat, count, avg)

    if best is None or best[0] <= THRESHOLDS["leader_index"]:
        return None

    index, b, subcat, count, avg = best
    return insight(
        "leader",
        f"{subcat}_index",
        f"{b['name']} over-indexes in {format_label(subcat)}: {count} products, "
        f"an index of {whole(index)} vs the market average of {avg:.0f}.",
        brand=b["name"],
        value=whole(index),
    )


def subcategory_gap(ctx: Dict[str, Any]) -> Optional[Insight]:
    n = len(ctx["brands"])
    best = None
    for b in stocked(ctx):
        for subcat, counts in ctx["bySubcategory"].items():
            if subcat == "other" or counts.get(b["slug"], 0) > 0:
                continue
            others = sum(c for slug, c in counts.items() if slug != b["slug"])
            if others < THRESHOLDS["gap_competitor_volume"]:
                continue
            if best is None or others > best[0]:
                best = (others, b, subcat)

    if best is None:
        return None

    others, b, subcat = best
    avg = others / (n - 1) if n > 1 else 0.0
    return insight(
        "gap",
        f"{subcat}_gap",
        f"{b['name']} has no {format_label(subcat)} while competitors carry {others} "
        f"({avg:.0f} per brand on average). White space to test.",
        brand=b["name"],
        value=others,
    )


def bottoms_focus(ctx: Dict[str, Any]) -> Optional[Insight]:
    best = None
    for b in stocked(ctx):
        s = share(b["categories"].get("bottoms", 0), b["total"])
        if best is None or s > best[0]:
            best = (s, b)

    # strict: a brand at exactly the threshold is not "bottoms-led"
    if best is None or not best[0] > THRESHOLDS["bottoms_focus_pct"]:
        return None

    s, b = best
    return insight(
        "trend",
        "bottoms_focus",
        f"{b['name']} is bottoms-led: {s:.0f}% of its catalog is bottoms.",
        brand=b["name"],
        value=round_half_up(s, 1),
    )


def launch_spike(ctx: Dict[str, Any]) -> Optional[Insight]:
    best = None
    for b in stocked(ctx):
        recent = (ctx["launchSummary"].get(b["slug"]) or {}).get("recentLaunches", 0)
        s = share(recent, b["total"])
        if recent and (best is None or s > best[0]):
            best = (s, b, recent)

    if best is None or not best[0] > THRESHOLDS["launch_spike_pct"]:
        return None

    s, b, recent = best
    return insight(
        "trend",
        "launch_spike",
        f"{b['name']} launched {recent} products in the latest drops ({s:.1f}% of catalog), a fresh-inventory push.",
        brand=b["name"],
        value=recent,
    )


def catalog_spread(ctx: Dict[str, Any]) -> Optional[Insight]:
    ranked = sorted(stocked(ctx), key=lambda b: b["total"], reverse=True)
    if len(ranked) < 2:
        return None

    big, small = ranked[0], ranked[-1]
    return insight(
        "comparison",
        "catalog_spread",
        f"{big['name']} carries {big['total']:,} products vs {small['name']}'s {small['total']:,}, "
        f"a {big['total'] / small['total']:.1f}x spread across tracked catalogs.",
        value=big["total"] - small["total"],
    )


# -------- FOCUS-BRAND RULES --------

def gender_balance(ctx: Dict[str, Any]) -> Optional[Insight]:
    f = ctx["focus"]
    if f is None:
        return None

    w = whole(share(f["genders"].get("womens", 0), f["total"]))
    m = whole(share(f["genders"].get("mens", 0), f["total"]))
    text = f"{f['name']} is uniquely balanced: {w}% women's / {m}% men's."

    others = competitors(ctx)
    if others:
        womens_skew = max(others, key=lambda b: share(b["genders"].get("womens", 0), b["total"]))
        mens_skew = max(others, key=lambda b: share(b["genders"].get("mens", 0), b["total"]))
        text += (
            f" {womens_skew['name']} skews {whole(share(womens_skew['genders'].get('womens', 0), womens_skew['total']))}% women's,"
            f" {mens_skew['name']} {whole(share(mens_skew['genders'].get('mens', 0), mens_skew['total']))}% men's."
        )

    return insight("leader", "gender_balance", text, brand=f["name"])


def earth_tones(ctx: Dict[str, Any]) -> Optional[Insight]:
    f = ctx["focus"]
    if f is None:
        return None

    focus_pct = whole(family_share(f, EARTH_TONES))
    industry = whole(mean([family_share(b, EARTH_TONES) for b in competitors(ctx)]))
    delta = focus_pct - industry
    return insight(
        "trend",
        "earth_tones",
        f"{f['name']}'s earth tone palette ({focus_pct}%) is {'+' if delta > 0 else ''}{delta}% vs industry avg, "
        f"reinforcing California lifestyle positioning.",
        brand=f["name"],
        value=focus_pct,
    )


def joggers_vs_rival(ctx: Dict[str, Any]) -> Optional[Insight]:
    f, r = ctx["focus"], ctx["rival"]
    if f is None or r is None:
        return None

    fc = f["subcategories"].get("joggers", 0)
    rc = r["subcategories"].get("joggers", 0)
    gap = fc - rc
    verdict = f"{f['name']} leads by {gap}" if gap > 0 else f"Gap of {abs(gap)} to close"
    return insight(
        "comparison",
        f"joggers_vs_{r['slug']}",
        f"Jogger battle: {f['name']} ({fc}) vs {r['name']} ({rc}). {verdict}.",
    )


def leggings_gap(ctx: Dict[str, Any]) -> Optional[Insight]:
    f, r = ctx["focus"], ctx["rival"]
    if f is None or r is None:
        return None

    fc = f["subcategories"].get("leggings", 0)
    rc = r["subcategories"].get("leggings", 0)
    if rc <= fc:
        return None
    return insight(
        "gap",
        "leggings",
        f"Leggings opportunity: {r['name']} has {rc} vs {f['name']}'s {fc}. Gap of {rc - fc} SKUs.",
        brand=f["name"],
        value=rc - fc,
    )


def neutrals(ctx: Dict[str, Any]) -> Optional[Insight]:
    f = ctx["focus"]
    if f is None:
        return None

    p = whole(family_share(f, NEUTRALS))
    return insight(
        "trend",
        "neutrals",
        f"Neutrals ({'/'.join(NEUTRALS)}) = {p}% of {f['name']}'s palette. Core basics that drive repeat purchases.",
        brand=f["name"],
        value=p,
    )


def mens_catalog(ctx: Dict[str, Any]) -> Optional[Insight]:
    f, r = ctx["focus"], ctx["rival"]
    if f is None or r is None:
        return None

    fm = f["genders"].get("mens", 0)
    rm = r["genders"].get("mens", 0)
    if fm <= rm:
        return None

    text = f"{f['name']} leads {r['name']} in men's: {fm} vs {rm} products."
    if rm:
        text += f" A {whole((fm / rm - 1) * 100)}% advantage."
    return insight("leader", "mens_catalog", text, brand=f["name"], value=fm)


def shorts_rank(ctx: Dict[str, Any]) -> Optional[Insight]:
    f = ctx["focus"]
    if f is None:
        return None

    fs = f["subcategories"].get("shorts", 0)
    if fs == 0:
        return None

    ranking = sorted(ctx["brands"].values(), key=lambda b: b["subcategories"].get("shorts", 0), reverse=True)
    rank = next(i for i, b in enumerate(ranking) if b["slug"] == f["slug"]) + 1
    if rank > 3:
        return None

    top = ranking[0]
    tail = "Category leader." if rank == 1 else f"Behind {top['name']} ({top['subcategories'].get('shorts', 0)})."
    return insight(
        "leader",
        "shorts",
        f"{f['name']} ranks #{rank} in shorts with {fs} products. {tail}",
        brand=f["name"],
        value=fs,
    )


def outerwear(ctx: Dict[str, Any]) -> Optional[Insight]:
    f, r = ctx["focus"], ctx["rival"]
    if f is None:
        return None

    fo = f["categories"].get("outerwear", 0)
    vs = f" vs {r['name']}'s {r['categories'].get('outerwear', 0)}" if r else ""
    return insight(
        "comparison",
        "outerwear",
        f"Outerwear depth: {f['name']} has {fo} products{vs}. Key for cooler weather expansion.",
    )


def market_landscape(ctx: Dict[str, Any]) -> Optional[Insight]:
    f = ctx["focus"]
    if f is None:
        return None

    others = sum(b["total"] for b in ctx["brands"].values() if b["slug"] != f["slug"])
    total = ctx["totals"]["products"]
    return insight(
        "comparison",
        "market_landscape",
        f"Market context: {others:,} competitor products tracked. "
        f"{f['name']}'s {f['total']:,} = {whole(share(f['total'], total))}% share of tracked catalog.",
    )


RULES: List[Rule] = [
    subcategory_leader,
    subcategory_gap,
    bottoms_focus,
    launch_spike,
    catalog_spread,
    gender_balance,
    earth_tones,
    joggers_vs_rival,
    leggings_gap,
    neutrals,
    mens_catalog,
    shorts_rank,
    outerwear,
    market_landscape,
]


def generate_insights(ctx: Dict[str, Any], rules: Optional[List[Rule]] = None) -> List[Insight]:
    out: List[Insight] = []
    for rule in RULES if rules is None else rules:
        found = rule(ctx)
        if found is not None:
            out.append(found)
    return out[: LIMITS["insights"]]

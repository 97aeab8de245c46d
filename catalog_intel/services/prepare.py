from __future__ import annotations

import argparse
import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from catalog_intel import config
from catalog_intel.services.aggregate import aggregate_brands
from catalog_intel.services.fetch import load_state
from catalog_intel.services.insights import build_context, generate_insights
from catalog_intel.services.launches import extract_launches, launch_summary
from catalog_intel.services.market import brand_profiles, subcategory_leaders, top_subcategories
from catalog_intel.services.mix import category_mix, color_mix
from catalog_intel.services.normalize import normalize_state
from catalog_intel.services.reference import DEFAULT_FOCUS_BRAND, DEFAULT_RIVALS
from catalog_intel.services.scorecard import generate_scorecard


def utc_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def prepare_dashboard_data(
    state: Dict[str, Any],
    focus_brand: Optional[str] = None,
    rivals: Optional[List[str]] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    state.json snapshot -> dashboard document.

    Pure apart from generated_at: the same snapshot always yields the same document.
    Raises FeedError if the snapshot is not shaped like a sitemap_products feed.
    """
    focus = focus_brand if focus_brand is not None else DEFAULT_FOCUS_BRAND
    if rivals is None:
        rivals = list(DEFAULT_RIVALS)
    elif isinstance(rivals, str):
        rivals = [rivals]
    else:
        rivals = list(rivals)

    normalized = normalize_state(state)
    agg = aggregate_brands(normalized)
    brands = agg["brands"]

    launches = extract_launches(normalized)
    summary = launch_summary(launches["launchVelocity"], launches["recentLaunches"], launches["initialLoad"])

    top = top_subcategories(agg["bySubcategory"])
    rival = next((r for r in rivals if r != focus), None)
    ctx = build_context(agg, summary, focus=focus, rival=rival)

    return {
        "brands": brands,
        "totals": agg["totals"],
        "recentLaunches": launches["recentLaunches"],
        "launchVelocity": launches["launchVelocity"],
        "launchSummary": summary,
        "byCategory": agg["byCategory"],
        "bySubcategory": agg["bySubcategory"],
        "byColor": agg["byColor"],
        "categoryMix": category_mix(brands),
        "colorMix": color_mix(brands),
        "topSubcategories": top,
        "subcategoryLeaders": {s: subcategory_leaders(brands, agg["bySubcategory"], s) for s in top},
        "brandProfiles": brand_profiles(brands, agg["bySubcategory"]),
        "insights": generate_insights(ctx),
        "scorecard": generate_scorecard(brands, agg["bySubcategory"], focus, rivals),
        "generated_at": utc_timestamp(now),
    }


def write_document(doc: Dict[str, Any], out_path: Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(doc, f, indent=2, ensure_ascii=False)
    return out_path


def run(source: str, out_path: Path, focus: str, rivals: List[str], timeout: float = 25.0, quiet: bool = False) -> Dict[str, Any]:
    def log(*args):
        if not quiet:
            print(*args)

    t0 = time.time(); log("START prepare-data:", source)
    t = time.time(); state = load_state(source, timeout=timeout); log("LOAD seconds:", round(time.time() - t, 2))
    t = time.time(); doc = prepare_dashboard_data(state, focus_brand=focus, rivals=rivals); log("PREPARE seconds:", round(time.time() - t, 2))
    t = time.time(); write_document(doc, out_path); log("WRITE seconds:", round(time.time() - t, 2), out_path)

    totals = doc["totals"]
    log("")
    log("=== Summary ===")
    log(f"Total products: {totals['products']:,}")
    log(f"Brands: {totals['brands']}")
    log(f"Categories: {totals['categories']}")
    log(f"Subcategories: {totals['subcategories']}")
    log(f"Insights generated: {len(doc['insights'])}")
    log(f"Recent launch entries: {len(doc['recentLaunches'])}")
    log("TOTAL seconds:", round(time.time() - t0, 2))
    return doc


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Transform a competitive-intel state.json snapshot into the dashboard data document."
    )
    parser.add_argument(
        "--state",
        default=config.STATE_SOURCE,
        help="Path or http(s) URL of the state.json snapshot.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=config.OUTPUT_PATH,
        help="Where to write the dashboard document.",
    )
    parser.add_argument(
        "--focus",
        default=config.FOCUS_BRAND,
        help="Brand slug the scorecard and focus insights are written for.",
    )
    parser.add_argument(
        "--rival",
        action="append",
        dest="rivals",
        help="Brand slug for a head-to-head table (repeatable; first one drives rival insights).",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress logs.",
    )
    args = parser.parse_args(argv)
    if not args.rivals:
        args.rivals = list(config.RIVAL_BRANDS)
    args.timeout = config.FETCH_TIMEOUT
    return args


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    run(args.state, args.output, args.focus, args.rivals, timeout=args.timeout, quiet=args.quiet)


if __name__ == "__main__":
    main()

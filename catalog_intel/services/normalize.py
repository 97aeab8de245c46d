from __future__ import annotations

from typing import Any, Dict, List, Optional


class FeedError(ValueError):
    """The input feed does not have the shape the pipeline expects."""


def is_gift_card(url: str) -> bool:
    u = url.lower()
    return ("gift" in u and "card" in u) or "giftcard" in u


def to_text(x) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def normalize_record(p: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(p, dict):
        raise FeedError(f"Product record must be an object, got {type(p).__name__}")

    url = to_text(p.get("url"))
    if not url:
        raise FeedError("Product record is missing its url")

    return {
        "url": url,
        "first_seen": to_text(p.get("first_seen")),
        "gender": to_text(p.get("gender")) or "unisex",
        "category": to_text(p.get("category")) or "other",
        "subcategory": to_text(p.get("subcategory")) or "other",
        "color": to_text(p.get("color")),
        "color_family": to_text(p.get("color_family")),
        "product_name": to_text(p.get("product_name")),
    }


def normalize_brand(products: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Normalized records for one brand, gift cards dropped, feed order kept."""
    if not isinstance(products, dict):
        raise FeedError(f"Brand products must be an object keyed by product id, got {type(products).__name__}")

    out = []
    for p in products.values():
        rec = normalize_record(p)
        if is_gift_card(rec["url"]):
            continue
        out.append(rec)
    return out


def normalize_state(state: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    if not isinstance(state, dict):
        raise FeedError("State document must be a JSON object")

    brands = state.get("sitemap_products")
    if not isinstance(brands, dict):
        raise FeedError("State document has no 'sitemap_products' mapping")

    return {slug: normalize_brand(products) for slug, products in brands.items()}

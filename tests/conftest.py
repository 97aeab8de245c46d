"""Shared feed builders for the pipeline tests."""

import pytest


def product(
    url,
    first_seen="2025-01-01T08:00:00Z",
    gender="womens",
    category="tops",
    subcategory="tees",
    color_family=None,
    product_name=None,
    color=None,
):
    p = {
        "url": url,
        "first_seen": first_seen,
        "gender": gender,
        "category": category,
        "subcategory": subcategory,
    }
    if color_family is not None:
        p["color_family"] = color_family
    if product_name is not None:
        p["product_name"] = product_name
    if color is not None:
        p["color"] = color
    return p


def catalog(slug, n, **fields):
    """n products for one brand, keyed by product id."""
    return {
        f"{slug}-{i}": product(f"https://{slug}.example/products/{slug}-item-{i}", **fields)
        for i in range(n)
    }


def merge(*feeds):
    out = {}
    for feed in feeds:
        out.update(feed)
    return out


def state(**brands):
    return {"sitemap_products": brands}


@pytest.fixture
def make_product():
    return product


@pytest.fixture
def make_catalog():
    return catalog


@pytest.fixture
def make_state():
    return state


@pytest.fixture
def merge_feeds():
    return merge


@pytest.fixture
def market_state():
    """Three brands with enough volume to exercise every insight and scorecard rule."""
    vuori = merge(
        catalog("vuori", 60, gender="mens", category="bottoms", subcategory="joggers", color_family="khaki", product_name="Ponto"),
        catalog("vuori-s", 50, gender="womens", category="bottoms", subcategory="shorts", color_family="heather", product_name="Kore"),
        catalog("vuori-t", 40, gender="womens", category="tops", subcategory="tees", color_family="black", product_name="Strato",
                first_seen="2025-02-10T09:00:00Z"),
    )
    lululemon = merge(
        catalog("lulu-l", 200, gender="womens", category="bottoms", subcategory="leggings", color_family="black", product_name="Align"),
        catalog("lulu-j", 30, gender="mens", category="bottoms", subcategory="joggers", color_family="navy", product_name="ABC"),
        catalog("lulu-t", 70, gender="mens", category="tops", subcategory="tees", color_family="white", product_name="Metal Vent"),
        catalog("lulu-h", 20, gender="womens", category="outerwear", subcategory="hoodies", color_family="gray", product_name="Scuba"),
    )
    alo = merge(
        catalog("alo-l", 80, gender="womens", category="bottoms", subcategory="leggings", color_family="black", product_name="Airbrush"),
        catalog("alo-b", 40, gender="womens", category="sports_bras", subcategory="sports_bras", color_family="pink", product_name="Airlift"),
    )
    return state(vuori=vuori, lululemon=lululemon, alo=alo)

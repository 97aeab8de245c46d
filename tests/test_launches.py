"""
Tests for launch extraction.

Sample selection inside an entry is implementation-defined, so only counts,
caps and ordering are asserted.
"""

from catalog_intel.services.launches import extract_launches, launch_summary, sample_name
from catalog_intel.services.normalize import normalize_state


def day(n):
    return f"2025-03-{n:02d}T10:00:00Z"


def extract(feed_state):
    return extract_launches(normalize_state(feed_state))


class TestInitialLoad:

    def test_initial_date_only_in_velocity(self, make_state, make_catalog, merge_feeds):
        feed = merge_feeds(
            make_catalog("init", 100, first_seen=day(1)),
            make_catalog("drop", 4, first_seen=day(5)),
        )
        out = extract(make_state(vuori=feed))

        assert out["launchVelocity"]["vuori"] == {"2025-03-01": 100, "2025-03-05": 4}
        assert [e["date"] for e in out["recentLaunches"]] == ["2025-03-05"]
        assert out["recentLaunches"][0]["count"] == 4
        assert out["initialLoad"]["vuori"] == "2025-03-01"

    def test_initial_load_is_per_brand(self, make_state, make_catalog, merge_feeds):
        vuori = merge_feeds(make_catalog("v0", 10, first_seen=day(1)), make_catalog("v1", 2, first_seen=day(3)))
        alo = make_catalog("a0", 10, first_seen=day(3))
        out = extract(make_state(vuori=vuori, alo=alo))

        # 03-03 is alo's initial load but a real launch day for vuori
        assert [(e["date"], e["brandSlug"]) for e in out["recentLaunches"]] == [("2025-03-03", "vuori")]
        assert out["launchVelocity"]["alo"] == {"2025-03-03": 10}

    def test_records_without_first_seen_ignored(self, make_state, make_product):
        feed = {
            "a": make_product("https://v.example/products/a", first_seen=day(1)),
            "b": make_product("https://v.example/products/b", first_seen=None),
        }
        out = extract(make_state(vuori=feed))
        assert out["launchVelocity"]["vuori"] == {"2025-03-01": 1}
        assert out["recentLaunches"] == []

    def test_brand_with_no_dates(self, make_state):
        out = extract(make_state(alo={}))
        assert out["launchVelocity"]["alo"] == {}
        assert out["initialLoad"]["alo"] is None


class TestRecentLaunches:

    def test_window_caps_distinct_dates(self, make_state, make_catalog, merge_feeds):
        feeds = [make_catalog("init", 5, first_seen=day(1))]
        feeds += [make_catalog(f"d{n}", 1, first_seen=day(n)) for n in range(2, 22)]
        out = extract(make_state(vuori=merge_feeds(*feeds)))

        dates = [e["date"] for e in out["recentLaunches"]]
        assert len(set(dates)) == 14
        assert dates[0] == "2025-03-21"
        assert dates[-1] == "2025-03-08"

    def test_ordering_date_then_count(self, make_state, make_catalog, merge_feeds):
        vuori = merge_feeds(make_catalog("v0", 5, first_seen=day(1)), make_catalog("v1", 2, first_seen=day(9)))
        alo = merge_feeds(make_catalog("a0", 5, first_seen=day(1)), make_catalog("a1", 7, first_seen=day(9)),
                          make_catalog("a2", 1, first_seen=day(4)))
        lulu = merge_feeds(make_catalog("l0", 5, first_seen=day(1)), make_catalog("l1", 3, first_seen=day(9)))
        out = extract(make_state(vuori=vuori, alo=alo, lululemon=lulu))

        got = [(e["date"], e["brandSlug"], e["count"]) for e in out["recentLaunches"]]
        assert got == [
            ("2025-03-09", "alo", 7),
            ("2025-03-09", "lululemon", 3),
            ("2025-03-09", "vuori", 2),
            ("2025-03-04", "alo", 1),
        ]

    def test_samples_capped(self, make_state, make_catalog, merge_feeds):
        feed = merge_feeds(make_catalog("init", 1, first_seen=day(1)), make_catalog("big", 25, first_seen=day(2)))
        entry = extract(make_state(vuori=feed))["recentLaunches"][0]
        assert entry["count"] == 25
        assert len(entry["products"]) == 10
        assert entry["brand"] == "Vuori"
        assert set(entry["products"][0]) == {"name", "url", "category", "gender"}


class TestSampleName:

    def test_prefers_product_name(self):
        assert sample_name({"product_name": "Ponto", "url": "https://v.example/products/x"}) == "Ponto"

    def test_falls_back_to_url_handle(self):
        assert sample_name({"url": "https://v.example/products/kore-short?variant=1"}) == "kore-short"

    def test_unknown(self):
        assert sample_name({"url": "https://v.example/p/123"}) == "Unknown"


class TestLaunchSummary:

    def test_summary_fields(self, make_state, make_catalog, merge_feeds):
        feed = merge_feeds(
            make_catalog("init", 50, first_seen=day(1)),
            make_catalog("a", 4, first_seen=day(3)),
            make_catalog("b", 4, first_seen=day(6)),
            make_catalog("c", 2, first_seen=day(8)),
        )
        out = extract(make_state(vuori=feed))
        summary = launch_summary(out["launchVelocity"], out["recentLaunches"], out["initialLoad"])["vuori"]

        assert summary == {
            "initialLoad": "2025-03-01",
            "initialLoadCount": 50,
            "launchDays": 3,
            "launches": 10,
            "recentLaunches": 10,
            "peakDate": "2025-03-03",
            "peakCount": 4,
        }

"""
Timezone catalog — standalone test suite.

All tests use the module directly with a fake zone source and clock.
"""

import unittest

from .timezone_utils import (
    CACHE_TTL_SECONDS,
    COMMON_TIMEZONE_GROUPS,
    FALLBACK_TIMEZONES,
    OTHER_TIMEZONES_LABEL,
    TimezoneCatalog,
    TimezoneOption,
    as_choices,
    find_timezone_by_value,
    format_timezone_name,
    get_timezone_stats,
    get_timezones_by_region,
    is_valid_timezone,
    search_timezones,
)

ZONES = {
    "UTC",
    "Europe/Paris",
    "America/New_York",
    "America/Argentina/Buenos_Aires",
    "Australia/Sydney",
}


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class CountingSource:
    def __init__(self, zones=ZONES):
        self.zones = zones
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return set(self.zones)


def make_catalog(source=None, clock=None):
    return TimezoneCatalog(clock=clock or FakeClock(), source=source or CountingSource())


# ===================================================================
#  Helper Tests
# ===================================================================

class TestIsValidTimezone(unittest.TestCase):

    def test_region_city(self):
        self.assertTrue(is_valid_timezone("America/New_York"))

    def test_rejects_bare_names_and_short_values(self):
        self.assertFalse(is_valid_timezone("UTC"))
        self.assertFalse(is_valid_timezone("A/B"))

    def test_rejects_empty_and_non_string(self):
        self.assertFalse(is_valid_timezone(""))
        self.assertFalse(is_valid_timezone(None))
        self.assertFalse(is_valid_timezone(42))


class TestFormatTimezoneName(unittest.TestCase):

    def test_uses_last_segment(self):
        self.assertEqual(format_timezone_name("America/New_York"), "New York")
        self.assertEqual(format_timezone_name("America/Argentina/Buenos_Aires"), "Buenos Aires")

    def test_single_segment_unchanged(self):
        self.assertEqual(format_timezone_name("UTC"), "UTC")

    def test_unknown(self):
        self.assertEqual(format_timezone_name(""), "Unknown")
        self.assertEqual(format_timezone_name(None), "Unknown")


# ===================================================================
#  Catalog Tests
# ===================================================================

class TestAllTimezones(unittest.TestCase):

    def test_sorted_region_city_only(self):
        self.assertEqual(
            make_catalog().all_timezones(),
            [
                "America/Argentina/Buenos_Aires",
                "America/New_York",
                "Australia/Sydney",
                "Europe/Paris",
            ],
        )

    def test_source_failure_uses_fallback(self):
        def broken():
            raise OSError("no tzdata")

        catalog = make_catalog(source=broken)
        with self.assertLogs("converter.timezone_utils", level="WARNING"):
            self.assertEqual(catalog.all_timezones(), list(FALLBACK_TIMEZONES))

    def test_empty_source_uses_fallback(self):
        catalog = make_catalog(source=CountingSource(zones=set()))
        with self.assertLogs("converter.timezone_utils", level="WARNING"):
            self.assertEqual(catalog.all_timezones(), list(FALLBACK_TIMEZONES))

    def test_source_without_region_city_uses_fallback(self):
        catalog = make_catalog(source=CountingSource(zones={"UTC", "GMT"}))
        with self.assertLogs("converter.timezone_utils", level="WARNING"):
            self.assertEqual(catalog.all_timezones(), list(FALLBACK_TIMEZONES))

    def test_real_zone_database(self):
        zones = TimezoneCatalog().all_timezones()
        self.assertIn("Australia/Sydney", zones)
        self.assertEqual(zones, sorted(zones))


class TestCatalogCache(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.source = CountingSource()
        self.catalog = make_catalog(source=self.source, clock=self.clock)

    def test_result_cached_within_ttl(self):
        first = self.catalog.all_timezones()
        self.clock.now += CACHE_TTL_SECONDS - 1
        self.assertIs(self.catalog.all_timezones(), first)
        self.assertEqual(self.source.calls, 1)

    def test_cache_expires_after_ttl(self):
        self.catalog.all_timezones()
        self.clock.now += CACHE_TTL_SECONDS
        self.catalog.all_timezones()
        self.assertEqual(self.source.calls, 2)

    def test_clear(self):
        self.catalog.timezone_groups()
        self.catalog.clear()
        self.catalog.timezone_groups()
        self.assertEqual(self.source.calls, 2)

    def test_groups_cached(self):
        first = self.catalog.timezone_groups()
        self.assertIs(self.catalog.timezone_groups(), first)

    def test_separate_catalogs_do_not_share_cache(self):
        other_source = CountingSource()
        make_catalog(source=other_source).all_timezones()
        self.catalog.all_timezones()
        self.assertEqual(self.source.calls, 1)
        self.assertEqual(other_source.calls, 1)


class TestTimezoneGroups(unittest.TestCase):

    def setUp(self):
        self.groups = make_catalog().timezone_groups()

    def test_common_groups_first(self):
        labels = [group.label for group in self.groups]
        self.assertEqual(
            labels,
            ["Australia", "New Zealand", "United Kingdom", "United States", OTHER_TIMEZONES_LABEL],
        )

    def test_other_group_excludes_common_zones(self):
        others = self.groups[-1].timezones
        self.assertEqual(
            others,
            (
                TimezoneOption("Buenos Aires", "America/Argentina/Buenos_Aires"),
                TimezoneOption("Paris", "Europe/Paris"),
            ),
        )

    def test_common_zones_unique(self):
        values = [tz.value for group in COMMON_TIMEZONE_GROUPS for tz in group.timezones]
        self.assertEqual(len(values), len(set(values)))

    def test_choices_shape(self):
        choices = as_choices(self.groups)
        self.assertEqual(choices[2], ("United Kingdom", [("Europe/London", "London")]))


# ===================================================================
#  Lookup Tests
# ===================================================================

class TestLookups(unittest.TestCase):

    def setUp(self):
        self.groups = make_catalog().timezone_groups()

    def test_find_by_value(self):
        self.assertEqual(
            find_timezone_by_value(self.groups, "Europe/London"),
            TimezoneOption("London", "Europe/London"),
        )
        self.assertEqual(
            find_timezone_by_value(self.groups, "Europe/Paris"),
            TimezoneOption("Paris", "Europe/Paris"),
        )

    def test_find_by_value_missing(self):
        self.assertIsNone(find_timezone_by_value(self.groups, "Mars/Olympus_Mons"))
        self.assertIsNone(find_timezone_by_value(self.groups, "UTC"))

    def test_region(self):
        self.assertEqual(len(get_timezones_by_region(self.groups, "australia")), 6)
        self.assertEqual(
            get_timezones_by_region(self.groups, "KINGDOM"),
            [TimezoneOption("London", "Europe/London")],
        )
        self.assertEqual(get_timezones_by_region(self.groups, "Antarctica"), [])

    def test_search_by_name_and_value(self):
        self.assertEqual(
            search_timezones(self.groups, "sydney"),
            [TimezoneOption("Sydney", "Australia/Sydney")],
        )
        results = search_timezones(self.groups, "america/")
        self.assertIn(TimezoneOption("Buenos Aires", "America/Argentina/Buenos_Aires"), results)
        self.assertEqual(len(results), 5)

    def test_search_empty_query(self):
        self.assertEqual(search_timezones(self.groups, ""), [])
        self.assertEqual(search_timezones(self.groups, None), [])

    def test_stats(self):
        stats = get_timezone_stats(self.groups)
        self.assertEqual(stats["total_groups"], 5)
        self.assertEqual(stats["total_timezones"], 14)
        self.assertEqual(stats["regions"][-1], OTHER_TIMEZONES_LABEL)


if __name__ == "__main__":
    unittest.main()

"""Tests for the deterministic text helpers."""

from datetime import datetime, timedelta, timezone

from fleet_hub.utils import hash_string, interpolate, iso_timestamp, pick, title_case, word_count


# ── hash_string ─────────────────────────────────────────────────────────────

class TestHashString:
    def test_matches_rolling_hash(self) -> None:
        assert hash_string("") == 0
        assert hash_string("a") == 97
        assert hash_string("ab") == 97 * 31 + 98
        assert hash_string("hello") == 99162322

    def test_is_deterministic(self) -> None:
        assert hash_string("emirate-dubai") == hash_string("emirate-dubai")

    def test_result_is_never_negative(self) -> None:
        for value in ("emirate-dubai-vehicle-suv", "x" * 200, "عربي"):
            assert hash_string(value) >= 0


# ── interpolate ─────────────────────────────────────────────────────────────

class TestInterpolate:
    def test_replaces_known_placeholders(self) -> None:
        assert interpolate("Rent a {vehicle} in {city}", {"vehicle": "SUV", "city": "Dubai"}) == "Rent a SUV in Dubai"

    def test_missing_or_empty_values_keep_placeholder(self) -> None:
        result = interpolate("{a} {b} {c}", {"a": "", "b": None})
        assert result == "{a} {b} {c}"

    def test_numbers_are_stringified(self) -> None:
        assert interpolate("From AED {price}", {"price": 99}) == "From AED 99"


# ── small helpers ───────────────────────────────────────────────────────────

class TestSmallHelpers:
    def test_pick_wraps_around(self) -> None:
        assert pick(["a", "b", "c"], 4) == "b"
        assert pick(["a", "b", "c"], 1, offset=2) == "a"

    def test_title_case(self) -> None:
        assert title_case("long term  rental") == "Long Term Rental"

    def test_word_count(self) -> None:
        assert word_count("  one two\nthree  ") == 3
        assert word_count("") == 0


# ── iso_timestamp ───────────────────────────────────────────────────────────

class TestIsoTimestamp:
    def test_converts_to_utc_with_z_suffix(self) -> None:
        dubai = timezone(timedelta(hours=4))
        assert iso_timestamp(datetime(2026, 1, 20, 10, 0, tzinfo=dubai)) == "2026-01-20T06:00:00.000Z"

    def test_naive_values_are_treated_as_utc(self) -> None:
        assert iso_timestamp(datetime(2026, 1, 20, 0, 0, 0, 123456)) == "2026-01-20T00:00:00.123Z"

    def test_defaults_to_now(self) -> None:
        value = iso_timestamp()
        assert value.endswith("Z")
        assert len(value) == len("2026-01-20T00:00:00.000Z")

"""Tests for shared normalization utilities."""

from datetime import date

from call_scripts.utils import (
    first_non_empty,
    normalize_company_key,
    normalize_domain,
    normalize_name,
    normalize_phone,
    normalize_website_host,
    parse_flexible_date,
    split_name,
)


class TestNormalizePhone:
    def test_strips_formatting(self):
        assert normalize_phone("(972) 555-1234") == "9725551234"

    def test_drops_country_code(self):
        assert normalize_phone("+1 972.555.1234") == "9725551234"

    def test_keeps_last_ten_digits(self):
        assert normalize_phone("001-44-972-555-1234") == "9725551234"

    def test_short_number_kept_whole(self):
        assert normalize_phone("555-0000") == "5550000"

    def test_none_is_empty(self):
        assert normalize_phone(None) == ""

    def test_integer_input(self):
        assert normalize_phone(9725551234) == "9725551234"


class TestNormalizeName:
    def test_lowercases_and_collapses(self):
        assert normalize_name("  Jane   DOE ") == "jane doe"

    def test_punctuation_becomes_space(self):
        assert normalize_name("O'Brien-Smith") == "o brien smith"

    def test_none_is_empty(self):
        assert normalize_name(None) == ""


class TestNormalizeCompanyKey:
    def test_strips_llc(self):
        assert normalize_company_key("Acme LLC") == "acme"

    def test_strips_inc_with_punctuation(self):
        assert normalize_company_key("BrightPath Logistics, Inc.") == "brightpath logistics"

    def test_suffix_inside_word_kept(self):
        assert normalize_company_key("Costco Wholesale") == "costco wholesale"

    def test_empty(self):
        assert normalize_company_key("") == ""


class TestNormalizeDomain:
    def test_lowercases_host(self):
        assert normalize_domain("Jane.Doe@ACME.com") == "acme.com"

    def test_missing_at_sign(self):
        assert normalize_domain("not-an-email") == ""

    def test_none(self):
        assert normalize_domain(None) == ""


class TestNormalizeWebsiteHost:
    def test_strips_scheme_www_and_path(self):
        assert normalize_website_host("https://www.BrightPath.io/about") == "brightpath.io"

    def test_bare_domain(self):
        assert normalize_website_host("acme.com") == "acme.com"


class TestSplitName:
    def test_first_and_rest(self):
        assert split_name("Mary Ann Smith") == ("Mary", "Ann Smith", "Mary Ann Smith")

    def test_single_word(self):
        assert split_name("Cher") == ("Cher", "", "Cher")

    def test_empty(self):
        assert split_name("   ") == ("", "", "")


class TestFirstNonEmpty:
    def test_skips_blank_values(self):
        assert first_non_empty(None, "", "   ", "Acme") == "Acme"

    def test_all_empty(self):
        assert first_non_empty(None, "") == ""


class TestParseFlexibleDate:
    def test_iso_date(self):
        assert parse_flexible_date("2026-03-05") == "03/05/2026"

    def test_slash_date_padded(self):
        assert parse_flexible_date("3/5/2026") == "03/05/2026"

    def test_iso_date_has_no_timezone_shift(self):
        assert parse_flexible_date("2026-01-01") == "01/01/2026"

    def test_datetime_string(self):
        assert parse_flexible_date("2026-11-30T10:00:00") == "11/30/2026"

    def test_long_month_format(self):
        assert parse_flexible_date("March 5, 2026") == "03/05/2026"

    def test_date_object(self):
        assert parse_flexible_date(date(2027, 12, 1)) == "12/01/2027"

    def test_empty(self):
        assert parse_flexible_date("") == ""
        assert parse_flexible_date(None) == ""

    def test_unparsable_returned_unchanged(self):
        assert parse_flexible_date("Q3 next year") == "Q3 next year"

    def test_impossible_calendar_date_returned_unchanged(self):
        assert parse_flexible_date("2026-02-30") == "2026-02-30"

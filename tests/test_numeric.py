"""Tests for conversion-rate / order-value parsing."""

import pytest

from app.core.numeric import (
    AttributionDefaults,
    NumericNormalizer,
    parse_conversion_rate,
    parse_money,
)

DEFAULTS = AttributionDefaults(conversion_rate=0.008, average_order_value=45.0)


class TestConversionRate:
    @pytest.mark.parametrize("raw, expected", [
        ("8", 0.08),
        ("8%", 0.08),
        ("8 percent", 0.08),
        ("1%", 0.01),
        ("0.8", 0.008),
        ("0.8%", 0.008),
        ("0.008", 0.008),
        ("0.01", 0.01),
        ("0.2", 0.2),
        ("100", 1.0),
        (8, 0.08),
        (0.008, 0.008),
    ])
    def test_disambiguation(self, raw, expected):
        assert parse_conversion_rate(raw, DEFAULTS) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "%", ".", "0", "-5", "1.2.3", "500"])
    def test_unusable_input_falls_back_to_default(self, raw):
        assert parse_conversion_rate(raw, DEFAULTS) == DEFAULTS.conversion_rate

    def test_boundary_reads_as_percentage(self):
        # "0.5" is ambiguous; the heuristic reads it as 0.5%
        assert parse_conversion_rate("0.5", DEFAULTS) == pytest.approx(0.005)

    def test_non_finite_number_falls_back(self):
        assert parse_conversion_rate(float("nan"), DEFAULTS) == DEFAULTS.conversion_rate
        assert parse_conversion_rate("9" * 400, DEFAULTS) == DEFAULTS.conversion_rate

    def test_uses_supplied_defaults(self):
        custom = AttributionDefaults(conversion_rate=0.02, average_order_value=10.0)
        assert parse_conversion_rate("", custom) == 0.02


class TestMoney:
    @pytest.mark.parametrize("raw, expected", [
        ("45", 45.0),
        ("$45", 45.0),
        ("$1,299.50", 1299.5),
        ("  12.5 USD ", 12.5),
        (60, 60.0),
        (19.99, 19.99),
        ("1e-05", 1e-05),
        ("1.2345678901234568e+16", 1.2345678901234568e+16),
    ])
    def test_parses(self, raw, expected):
        assert parse_money(raw, DEFAULTS) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "", "free", "$0", "0.00", "1.2.3", -10, 10**400, float("inf")])
    def test_unusable_input_falls_back_to_default(self, raw):
        assert parse_money(raw, DEFAULTS) == DEFAULTS.average_order_value

    @pytest.mark.parametrize("raw", ["$45", "1,299.50", "0.5", "abc", "", "12", "$3.333", "0.00001", "12345678901234567"])
    def test_canonical_form_is_stable(self, raw):
        once = parse_money(raw, DEFAULTS)
        assert parse_money(str(once), DEFAULTS) == once


class TestNormalizer:
    def test_binds_defaults(self):
        n = NumericNormalizer(AttributionDefaults(conversion_rate=0.05, average_order_value=99.0))
        assert n.conversion_rate(None) == 0.05
        assert n.money("nope") == 99.0
        assert n.conversion_rate("2%") == pytest.approx(0.02)
        assert n.money("$10") == 10.0

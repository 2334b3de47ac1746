"""
Tests for the interest calculator.

These tests verify:
  - The documented example (10,000,000 at 2.5% for 12 months)
  - Rounding happens once, half-to-even, at the end
  - Rates can be given as Decimal, int or decimal string — never float
  - Negative and oversized inputs are rejected
"""

from decimal import Decimal

import pytest

from bank_ledger.exceptions import InvalidInterestTermsError
from bank_ledger.services.interest import (
    INTEREST_TAX_RATE,
    MAX_MONTHS,
    MAX_PRINCIPAL,
    MAX_RATE_PERCENT,
    project_interest,
)


class TestProjection:

    def test_documented_example(self):
        result = project_interest(10_000_000, Decimal("2.5"), 12)

        assert result.gross_interest == 250_000
        assert result.tax == 38_500
        assert result.net_interest == 211_500
        assert result.total_amount == 10_211_500

    def test_rate_as_string_and_int(self):
        """Decimal strings and ints give the same result as Decimal."""
        from_string = project_interest(10_000_000, "2.5", 12)
        from_decimal = project_interest(10_000_000, Decimal("2.5"), 12)
        assert from_string == from_decimal

        from_int = project_interest(1_000_000, 3, 12)
        assert from_int.gross_interest == 30_000
        assert from_int.tax == 4_620

    def test_partial_year(self):
        """6 months earns half a year's interest."""
        result = project_interest(1_200_000, "5", 6)
        assert result.gross_interest == 30_000
        assert result.tax == 4_620
        assert result.net_interest == 25_380
        assert result.total_amount == 1_225_380

    def test_zero_term_earns_nothing(self):
        result = project_interest(5_000_000, "3.8", 0)
        assert result.gross_interest == 0
        assert result.tax == 0
        assert result.net_interest == 0
        assert result.total_amount == 5_000_000

    def test_zero_rate_earns_nothing(self):
        result = project_interest(5_000_000, "0", 24)
        assert result.net_interest == 0
        assert result.total_amount == 5_000_000

    def test_tax_rate_constant(self):
        assert INTEREST_TAX_RATE == Decimal("0.154")


class TestRounding:
    """Each output is rounded once to a whole unit, ties to even."""

    def test_half_rounds_to_even_down(self):
        # gross = 1 * 50% * 1 = 0.5 -> 0
        result = project_interest(1, "50", 12)
        assert result.gross_interest == 0

    def test_half_rounds_to_even_up(self):
        # gross = 3 * 50% = 1.5 -> 2
        result = project_interest(3, "50", 12)
        assert result.gross_interest == 2

    def test_each_result_rounded_from_exact_value(self):
        """
        gross = 1000 * 1% * 1/12 = 0.8333...  -> 1
        tax   = 0.8333... * 0.154 = 0.1283... -> 0
        net   = 0.7050...                     -> 1
        total = 1000.7050...                  -> 1001
        """
        result = project_interest(1000, "1", 1)
        assert result.gross_interest == 1
        assert result.tax == 0
        assert result.net_interest == 1
        assert result.total_amount == 1001

    def test_results_are_rounded_independently(self):
        """
        gross = 1.5    -> 2
        tax   = 0.231  -> 0
        net   = 1.269  -> 1
        so gross - tax is one more than net.
        """
        result = project_interest(3, "50", 12)
        assert (result.gross_interest, result.tax, result.net_interest) == (2, 0, 1)
        assert result.gross_interest - result.tax == result.net_interest + 1
        assert result.total_amount == 4

    def test_deterministic(self):
        """The same inputs always produce the same projection."""
        results = {project_interest(7_777_777, "3.33", 7) for _ in range(20)}
        assert len(results) == 1

    def test_results_are_integers(self):
        result = project_interest(123_457, "2.75", 5)
        for value in (result.gross_interest, result.tax, result.net_interest, result.total_amount):
            assert isinstance(value, int)


class TestInvalidTerms:

    def test_float_rate_rejected(self):
        with pytest.raises(TypeError):
            project_interest(1_000_000, 2.5, 12)

    def test_float_principal_rejected(self):
        with pytest.raises(TypeError):
            project_interest(1_000_000.0, "2.5", 12)

    def test_negative_principal(self):
        with pytest.raises(InvalidInterestTermsError):
            project_interest(-1, "2.5", 12)

    def test_negative_rate(self):
        with pytest.raises(InvalidInterestTermsError):
            project_interest(1_000, "-0.1", 12)

    def test_negative_months(self):
        with pytest.raises(InvalidInterestTermsError):
            project_interest(1_000, "2.5", -1)

    def test_garbage_rate(self):
        with pytest.raises(InvalidInterestTermsError):
            project_interest(1_000, "two percent", 12)

    def test_nan_rate(self):
        with pytest.raises(InvalidInterestTermsError):
            project_interest(1_000, "NaN", 12)

    def test_principal_above_bound(self):
        with pytest.raises(InvalidInterestTermsError):
            project_interest(MAX_PRINCIPAL + 1, "2.5", 12)

    def test_huge_principal(self):
        with pytest.raises(InvalidInterestTermsError):
            project_interest(10**30, "2.5", 12)

    @pytest.mark.parametrize("rate", ["100.001", "1E+30"])
    def test_rate_above_bound(self, rate):
        with pytest.raises(InvalidInterestTermsError):
            project_interest(1_000, rate, 12)

    def test_months_above_bound(self):
        with pytest.raises(InvalidInterestTermsError):
            project_interest(1_000, "2.5", MAX_MONTHS + 1)


class TestBounds:

    def test_largest_inputs_are_exact(self):
        """At every bound at once the result still comes back exact."""
        result = project_interest(MAX_PRINCIPAL, MAX_RATE_PERCENT, MAX_MONTHS)

        # 100% a year for 100 years
        assert result.gross_interest == MAX_PRINCIPAL * 100
        # exact tax ends in .8, so it rounds up
        assert result.tax == MAX_PRINCIPAL * 154 // 10 + 1
        assert result.net_interest == result.gross_interest - result.tax
        assert result.total_amount == MAX_PRINCIPAL + result.net_interest

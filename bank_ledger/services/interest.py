"""
Interest calculator — projected simple interest for a deposit product.

    gross = principal × (rate / 100) × (months / 12)
    tax   = gross × 0.154
    net   = gross − tax
    total = principal + net

Everything is computed exactly with Decimal and each of the four results
is rounded to a whole minor unit with ROUND_HALF_EVEN only at the very end,
so rounding never compounds across steps. The same inputs always give the
same output.

Because each result is rounded from its own exact value, the rounded
figures need not add up: gross_interest - tax can differ from net_interest
by one minor unit (an exact gross of 1.5 gives gross 2, tax 0, net 1).
Display layers should show the returned fields rather than derive one from
the others.

Inputs are bounded: principal by MAX_PRINCIPAL (the largest balance an
account can hold), the annual rate by MAX_RATE_PERCENT and the term by
MAX_MONTHS. Anything larger is rejected as invalid terms.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN, localcontext

from bank_ledger.exceptions import InvalidInterestTermsError

# Interest income withholding tax (14% income tax + 1.4% local tax).
INTEREST_TAX_RATE = Decimal("0.154")

_PRECISION = 50

MAX_PRINCIPAL = 2**63 - 1
MAX_RATE_PERCENT = Decimal(100)
MAX_MONTHS = 1200


@dataclass(frozen=True)
class InterestProjection:
    """Projected interest, all amounts in minor currency units."""
    principal: int
    annual_rate_percent: Decimal
    months: int
    gross_interest: int
    tax: int
    net_interest: int
    total_amount: int


def project_interest(
    principal: int,
    annual_rate_percent: Decimal | int | str,
    months: int,
) -> InterestProjection:
    """
    Project the interest a principal earns over a term.

    Args:
        principal: Amount deposited, in minor units.
        annual_rate_percent: Annual rate as a percentage (2.5 for 2.5%).
                             Decimal, int or decimal string; floats are
                             refused since they cannot represent most rates
                             exactly.
        months: Term length in months.

    Raises:
        TypeError: If a float is passed for any argument.
        InvalidInterestTermsError: If any input is negative or above its
                                   bound, or the rate is not a number.
    """
    if isinstance(annual_rate_percent, float) or isinstance(principal, float) or isinstance(months, float):
        raise TypeError("Interest inputs must be exact (int, Decimal or str), not float")

    try:
        rate = Decimal(annual_rate_percent)
    except ArithmeticError as exc:
        raise InvalidInterestTermsError(f"Invalid interest rate: {annual_rate_percent!r}") from exc
    if not rate.is_finite():
        raise InvalidInterestTermsError(f"Invalid interest rate: {annual_rate_percent!r}")

    if principal < 0:
        raise InvalidInterestTermsError(f"Principal must not be negative, got {principal}")
    if rate < 0:
        raise InvalidInterestTermsError(f"Interest rate must not be negative, got {rate}")
    if months < 0:
        raise InvalidInterestTermsError(f"Term must not be negative, got {months} months")
    if principal > MAX_PRINCIPAL:
        raise InvalidInterestTermsError(f"Principal must not exceed {MAX_PRINCIPAL}, got {principal}")
    if rate > MAX_RATE_PERCENT:
        raise InvalidInterestTermsError(f"Interest rate must not exceed {MAX_RATE_PERCENT}%, got {rate}")
    if months > MAX_MONTHS:
        raise InvalidInterestTermsError(f"Term must not exceed {MAX_MONTHS} months, got {months}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        gross = Decimal(principal) * rate / 100 * months / 12
        tax = gross * INTEREST_TAX_RATE
        net = gross - tax
        total = principal + net

        return InterestProjection(
            principal=principal,
            annual_rate_percent=rate,
            months=months,
            gross_interest=_to_minor_units(gross),
            tax=_to_minor_units(tax),
            net_interest=_to_minor_units(net),
            total_amount=_to_minor_units(total),
        )


def _to_minor_units(value: Decimal) -> int:
    # Runs under the caller's widened context
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_EVEN))

"""Integer money utilities.

All prices, totals and balances are int in the smallest currency unit (IDR has
no minor unit, and the gateway rejects fractional amounts). No float, no Decimal.
"""


def rupiah_display(amount: int) -> str:
    """Format an amount for display: 20000 -> 'Rp20.000', -1500 -> '-Rp1.500'."""
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(amount):,}".replace(",", ".")
    return f"{sign}Rp{grouped}"


# Upper bound for any single amount accepted from a client. Far below BIGINT,
# so balances and order totals built from such amounts cannot overflow.
MAX_AMOUNT = 1_000_000_000_000

"""
Conversion of integer base units (wei, lamports) to display amounts.
"""

from decimal import Decimal


def format_units(amount: int, decimals: int) -> str:
    """
    Format an integer amount of base units as a plain decimal string.

    Uses Decimal so large balances keep full precision.
    """
    value = Decimal(amount) / (Decimal(10) ** decimals)
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


def format_ether(amount: int) -> str:
    """Format a wei amount in ether."""
    return format_units(amount, 18)


def format_sol(amount: int) -> str:
    """Format a lamport amount in SOL."""
    return format_units(amount, 9)

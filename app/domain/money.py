# app/domain/money.py
"""Arytmetyka pieniedzy: tylko int w jednostkach minor (paise), zero floatow."""
from typing import Iterable, NamedTuple

BPS_DENOMINATOR = 10000


class Totals(NamedTuple):
    subtotal: int
    shipping: int
    tax: int
    total: int


def tax_for(base: int, tax_rate_bps: int) -> int:
    """Podatek zaokraglany half-up do pelnej jednostki: (base*bps + 5000) // 10000."""
    return (base * tax_rate_bps + BPS_DENOMINATOR // 2) // BPS_DENOMINATOR


def compute_totals(lines: Iterable, shipping: int, tax_rate_bps: int) -> Totals:
    subtotal = sum(line.unit_price * line.quantity for line in lines)
    tax = tax_for(subtotal + shipping, tax_rate_bps)
    return Totals(subtotal, shipping, tax, subtotal + shipping + tax)

"""
Sayı dönüştürme ve tr-TR biçimlendirme yardımcıları.
"""
from __future__ import annotations

import math

from ecommerce_finance.config.settings import CURRENCY_SYMBOL

_CURRENCY_MARKS = ("₺", "TL", "$", "€", "£", "\xa0", " ")


def parse_number(value) -> float:
    """
    Hücre veya JSON değerini float'a çevirir. Boş/hatalı değerler 0 döner.

    '1.234,56' → 1234.56, '1,234.56' → 1234.56, '₺99,90' → 99.9
    """
    if value is None or isinstance(value, bool):
        return float(value or 0)
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    if not isinstance(value, str):
        return 0.0

    cleaned = value.strip()
    for mark in _CURRENCY_MARKS:
        cleaned = cleaned.replace(mark, "")
    if not cleaned:
        return 0.0

    if "," in cleaned and "." in cleaned:
        # Son görülen ayraç ondalık ayracıdır
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        cleaned = cleaned.replace(",", ".")

    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_int(value) -> int:
    return int(parse_number(value))


def _swap_separators(text: str) -> str:
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: float) -> str:
    """Türk Lirası biçimi: 1234.5 → '₺1.234,50'"""
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{_swap_separators(f'{abs(value):,.2f}')}"


def format_number(value: float) -> str:
    """Binlik ayraçlı sayı: 1234 → '1.234', 1234.5 → '1.234,5'"""
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.3f}".rstrip("0").rstrip(".")
    return f"{sign}{_swap_separators(text)}"

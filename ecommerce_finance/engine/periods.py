"""
Ay etiketlerini kronolojik sıralar.

Etiketler serbest metindir ("2025 Ocak", "Ocak 2025", "2025 OCAK" ...).
Türkçe ay adı ve 4 haneli yıl bulunabilirse (yıl, ay) sırası kullanılır,
aksi halde düz metin karşılaştırmasına düşülür.
"""
from __future__ import annotations

import re
from functools import cmp_to_key
from typing import Iterable, Optional

from ecommerce_finance.engine.analyzer import turkish_lower
from ecommerce_finance.models.order import OrderRecord

TR_MONTHS = (
    "ocak", "şubat", "mart", "nisan", "mayıs", "haziran",
    "temmuz", "ağustos", "eylül", "ekim", "kasım", "aralık",
)

_YEAR_RE = re.compile(r"\d{4}")


def _find_month(lowered: str) -> int:
    for i, name in enumerate(TR_MONTHS):
        if name in lowered:
            return i
    return -1


def parse_period(label: str) -> tuple[int, int]:
    """Etiketten (ay indeksi, yıl) çıkarır. Ay bulunamazsa -1, yıl yoksa 0."""
    # "ARALIK" Türkçe, "NISAN" düz küçültmeyle eşleşir
    for lowered in (turkish_lower(label), label.lower()):
        month_idx = _find_month(lowered)
        if month_idx != -1:
            break

    match = _YEAR_RE.search(label)
    year = int(match.group(0)) if match else 0
    return month_idx, year


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def compare_periods(a: str, b: str) -> int:
    """
    İki ay etiketini karşılaştırır: -1, 0 veya 1.

    Etiketlerden biri ay adı içermiyorsa tüm etiket metin olarak
    karşılaştırılır. Karışık listelerde bu geçişli bir sıra vermeyebilir.
    """
    month_a, year_a = parse_period(a)
    month_b, year_b = parse_period(b)

    if month_a != -1 and month_b != -1:
        if year_a != year_b:
            return _sign(year_a - year_b)
        return _sign(month_a - month_b)

    return (a > b) - (a < b)


def sort_periods(labels: Iterable[str]) -> list[str]:
    return sorted(labels, key=cmp_to_key(compare_periods))


def unique_periods(records: Iterable[OrderRecord]) -> list[str]:
    """Verideki boş olmayan ay etiketleri, kronolojik sırada."""
    return sort_periods(dict.fromkeys(r.period for r in records if r.period))


def unique_platforms(records: Iterable[OrderRecord]) -> list[str]:
    return sorted({r.platform for r in records if r.platform})


def default_comparison_pair(periods: list[str]) -> Optional[tuple[str, str]]:
    """Karşılaştırma ekranının varsayılan seçimi: son iki ay."""
    if len(periods) >= 2:
        return periods[-2], periods[-1]
    if len(periods) == 1:
        return periods[0], periods[0]
    return None

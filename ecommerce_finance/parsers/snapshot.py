"""
Yedek (JSON) dosyası okuma/yazma.

Format: {"sales": [sipariş satırları], "expenses": {ay: {marketing, operations}}}
"""
from __future__ import annotations

import json
import logging
from datetime import date
from typing import Iterable, Optional

from ecommerce_finance.config.settings import BACKUP_FILE_PATTERN
from ecommerce_finance.models.expense import ExpenseTable, expenses_from_dict, expenses_to_dict
from ecommerce_finance.models.order import OrderRecord
from ecommerce_finance.parsers.errors import SnapshotError

logger = logging.getLogger(__name__)


def dump_snapshot(records: Iterable[OrderRecord], expenses: ExpenseTable) -> str:
    """Veri setini yedek JSON metnine çevirir."""
    data = {
        "sales": [r.to_dict() for r in records],
        "expenses": expenses_to_dict(expenses),
    }
    return json.dumps(data, ensure_ascii=False, indent=2)


def load_snapshot(text) -> tuple[list[OrderRecord], ExpenseTable]:
    """
    Yedek JSON metnini parse eder.

    Raises: SnapshotError - JSON geçersizse veya "sales" listesi yoksa
    """
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError) as e:
        logger.error("Yedek dosyasi okunamadi: %s", e)
        raise SnapshotError("Dosya okunamadı.") from e

    if not isinstance(parsed, dict) or not isinstance(parsed.get("sales"), list):
        raise SnapshotError("Geçersiz yedek dosyası formatı.")

    records = [OrderRecord.from_dict(row) for row in parsed["sales"] if isinstance(row, dict)]
    raw_expenses = parsed.get("expenses")
    expenses = expenses_from_dict(raw_expenses if isinstance(raw_expenses, dict) else {})

    logger.info("Yedek yuklendi: %d satir, %d aylik gider", len(records), len(expenses))
    return records, expenses


def snapshot_filename(today: Optional[date] = None) -> str:
    """eticaret-yedek-2025-01-31.json"""
    return BACKUP_FILE_PATTERN.format(date=(today or date.today()).isoformat())

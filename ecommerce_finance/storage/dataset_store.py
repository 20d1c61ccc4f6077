"""
Uygulamanın tek veri sahibi: sipariş satırları + sabit gider tablosu.

Veri yalnızca bütün olarak değiştirilir (Excel yükleme, yedekten dönme,
sıfırlama). İki ayrı JSON dosyasında saklanır.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import BinaryIO, Iterable, Mapping, Optional, Union

from ecommerce_finance.config.settings import (
    DATA_DIR,
    DEFAULT_FIXED_EXPENSES,
    EXPENSES_STORE_FILE,
    SALES_STORE_FILE,
    SEED_FILE,
)
from ecommerce_finance.models.expense import (
    ExpenseTable,
    MonthlyExpense,
    expenses_from_dict,
    expenses_to_dict,
)
from ecommerce_finance.models.order import OrderRecord
from ecommerce_finance.parsers.errors import SnapshotError
from ecommerce_finance.parsers.excel_workbook import parse_workbook
from ecommerce_finance.parsers.snapshot import dump_snapshot, load_snapshot

logger = logging.getLogger(__name__)


class DatasetStore:
    """Sürümlü bellek içi veri seti. Her değişiklikte `version` artar."""

    def __init__(self, data_dir: Optional[Path] = None, seed_file: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
        self.seed_file = Path(seed_file) if seed_file is not None else SEED_FILE
        self._records: tuple[OrderRecord, ...] = ()
        self._expenses: ExpenseTable = {}
        self._version = 0

    # ── Okuma ─────────────────────────────────────────────
    @property
    def records(self) -> tuple[OrderRecord, ...]:
        return self._records

    @property
    def expenses(self) -> Mapping[str, MonthlyExpense]:
        return MappingProxyType(self._expenses)

    @property
    def version(self) -> int:
        return self._version

    @property
    def sales_path(self) -> Path:
        return self.data_dir / SALES_STORE_FILE

    @property
    def expenses_path(self) -> Path:
        return self.data_dir / EXPENSES_STORE_FILE

    # ── Yaşam döngüsü ─────────────────────────────────────
    def load(self) -> "DatasetStore":
        """Kayıtlı veriyi okur; yoksa veya bozuksa varsayılanlara döner."""
        records = self._read_sales()
        expenses = self._read_expenses()
        self._set(records, expenses)
        logger.info(
            "Veri seti yuklendi: %d satir, %d aylik gider (surum %d)",
            len(self._records), len(self._expenses), self._version,
        )
        return self

    def replace(
        self,
        records: Iterable[OrderRecord],
        expenses: Mapping[str, MonthlyExpense],
    ) -> None:
        """Tüm veri setini değiştirir ve diske yazar."""
        self._set(records, expenses)
        self._persist()
        logger.info("Veri seti degistirildi: %d satir (surum %d)", len(self._records), self._version)

    def clear(self) -> None:
        """Yüklü veriyi ve geçmişi siler; başlangıç satırlarına döner."""
        for path in (self.sales_path, self.expenses_path):
            path.unlink(missing_ok=True)
        self._set(self._seed_records(), {})
        logger.info("Veri seti sifirlandi (surum %d)", self._version)

    # ── İçe/dışa aktarma ──────────────────────────────────
    def import_workbook(self, source: Union[str, Path, BinaryIO]) -> None:
        records, expenses = parse_workbook(source)
        self.replace(records, expenses)

    def restore(self, text) -> None:
        records, expenses = load_snapshot(text)
        self.replace(records, expenses)

    def export(self) -> str:
        return dump_snapshot(self._records, self._expenses)

    # ── Yardımcılar ───────────────────────────────────────
    def _set(self, records: Iterable[OrderRecord], expenses: Mapping[str, MonthlyExpense]) -> None:
        self._records = tuple(records)
        self._expenses = dict(expenses)
        self._version += 1

    def _persist(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.sales_path.write_text(
            json.dumps([r.to_dict() for r in self._records], ensure_ascii=False),
            encoding="utf-8",
        )
        self.expenses_path.write_text(
            json.dumps(expenses_to_dict(self._expenses), ensure_ascii=False),
            encoding="utf-8",
        )

    def _seed_records(self) -> list[OrderRecord]:
        if not self.seed_file.exists():
            return []
        try:
            records, _ = load_snapshot(self.seed_file.read_text(encoding="utf-8"))
        except (OSError, SnapshotError) as e:
            logger.warning("Baslangic verisi okunamadi (%s): %s", self.seed_file, e)
            return []
        return records

    def _read_sales(self) -> list[OrderRecord]:
        if not self.sales_path.exists():
            return self._seed_records()
        try:
            rows = json.loads(self.sales_path.read_text(encoding="utf-8"))
            if not isinstance(rows, list):
                raise ValueError("satis verisi liste degil")
            return [OrderRecord.from_dict(row) for row in rows if isinstance(row, dict)]
        except (OSError, ValueError) as e:
            logger.error("Kayitli satis verisi okunamadi: %s", e)
            return self._seed_records()

    def _read_expenses(self) -> ExpenseTable:
        if not self.expenses_path.exists():
            return expenses_from_dict(DEFAULT_FIXED_EXPENSES)
        try:
            data = json.loads(self.expenses_path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("gider verisi sozluk degil")
            return expenses_from_dict(data)
        except (OSError, ValueError) as e:
            logger.error("Kayitli gider verisi okunamadi: %s", e)
            return expenses_from_dict(DEFAULT_FIXED_EXPENSES)

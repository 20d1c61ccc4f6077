"""
E-ticaret Excel dosyasını parse eder ve ortak veri modeline dönüştürür.

Dosya formatı (.xlsx, ilk satır başlık):
  - 1. sayfa → Sipariş satırları, A–Q sütunları sabit sırada
  - 2. sayfa → Aylık sabit giderler (opsiyonel)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Union
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ecommerce_finance.config.settings import DEFAULT_PLATFORM, DEFAULT_PRODUCT_GROUP
from ecommerce_finance.models.expense import ExpenseTable, MonthlyExpense
from ecommerce_finance.models.order import FIELD_KEYS, OrderRecord
from ecommerce_finance.parsers.errors import WorkbookError
from ecommerce_finance.utils.numbers import parse_number

logger = logging.getLogger(__name__)

# A..Q sütunları, OrderRecord alan sırasıyla
SALES_COLUMNS = list(FIELD_KEYS.values())

# Gider sayfası sütun indeksleri
AD_MONTH_COL, AD_AMOUNT_COL = 0, 1        # A, B
OPS_MONTH_COL, OPS_AMOUNT_COL = 4, 5      # E, F


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _month_label(value) -> str:
    if _is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _parse_sales_sheet(ws) -> list[OrderRecord]:
    """
    Sipariş sayfasını okur.

    Beklenen sütunlar:
        A Platform, B Sipariş Tarihi, C Ay, D Sipariş No, E Sipariş Statüsü,
        F Ürün Kodu, G Ürün Grubu, H Ürün Açıklaması, I Ürün Adedi,
        J Alış Fiyatı (toplam maliyet), K Sipariş Tutarı, L Komisyon,
        M Kargo, N İade Kargo Bedeli, O Ceza Bedeli, P Platform Gideri,
        Q Sipariş Sayısı
    """
    records: list[OrderRecord] = []

    for row in ws.iter_rows(min_row=2, values_only=True):
        cells = list(row[:len(SALES_COLUMNS)])
        if all(_is_blank(c) for c in cells):
            continue
        cells += [None] * (len(SALES_COLUMNS) - len(cells))
        row_data = dict(zip(SALES_COLUMNS, cells))
        if _is_blank(row_data["Platform"]):
            row_data["Platform"] = DEFAULT_PLATFORM
        if _is_blank(row_data["UrunGrubu"]):
            row_data["UrunGrubu"] = DEFAULT_PRODUCT_GROUP
        records.append(OrderRecord.from_dict(row_data))

    return records


def _parse_expense_sheet(ws) -> ExpenseTable:
    """
    Gider sayfasını okur. Reklam: A (Ay) / B (Tutar), İşletme: E (Ay) / F (Tutar).
    Aynı ay birden fazla satırda geçerse tutarlar toplanır.
    """
    expenses: ExpenseTable = {}

    for row in ws.iter_rows(min_row=2, values_only=True):
        cells = list(row) + [None] * max(0, OPS_AMOUNT_COL + 1 - len(row))

        ad_month = _month_label(cells[AD_MONTH_COL])
        if ad_month:
            current = expenses.get(ad_month, MonthlyExpense())
            expenses[ad_month] = current.add(marketing=parse_number(cells[AD_AMOUNT_COL]))

        ops_month = _month_label(cells[OPS_MONTH_COL])
        if ops_month:
            current = expenses.get(ops_month, MonthlyExpense())
            expenses[ops_month] = current.add(operations=parse_number(cells[OPS_AMOUNT_COL]))

    return expenses


def parse_workbook(
    source: Union[str, Path, BinaryIO],
) -> tuple[list[OrderRecord], ExpenseTable]:
    """
    İki sayfalı e-ticaret Excel dosyasını parse eder.

    Returns: (sipariş satırları, aylık sabit giderler)
    """
    try:
        wb = load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
        logger.error("Excel dosyasi acilamadi: %s", e, exc_info=True)
        raise WorkbookError("Dosya okunamadı. Geçerli bir .xlsx dosyası seçin.") from e

    try:
        sheets = wb.worksheets
        if not sheets:
            raise WorkbookError("Excel dosyasında sayfa bulunamadı.")

        records = _parse_sales_sheet(sheets[0])
        expenses = _parse_expense_sheet(sheets[1]) if len(sheets) > 1 else {}
    finally:
        wb.close()

    logger.info(
        "Excel yuklendi: %d satir, %d aylik gider kaydi", len(records), len(expenses)
    )
    return records, expenses

import json

import pytest
from openpyxl import Workbook

from ecommerce_finance.config.settings import ALL
from ecommerce_finance.engine.analyzer import calculate_metrics, filter_records, get_category_stats
from ecommerce_finance.models.expense import MonthlyExpense
from ecommerce_finance.models.order import OrderRecord
from ecommerce_finance.parsers.errors import SnapshotError, WorkbookError
from ecommerce_finance.parsers.excel_workbook import parse_workbook
from ecommerce_finance.parsers.snapshot import dump_snapshot, load_snapshot, snapshot_filename

HEADER = ["Platform", "Tarih", "Ay", "No", "Statü", "Kod", "Grup", "Açıklama", "Adet",
          "Alış", "Tutar", "Komisyon", "Kargo", "İade Kargo", "Ceza", "Platform Gideri",
          "Sipariş Sayısı"]


def _write_workbook(path, sales_rows, expense_rows=None):
    wb = Workbook()
    ws = wb.active
    ws.append(HEADER)
    for row in sales_rows:
        ws.append(row)
    if expense_rows is not None:
        ws2 = wb.create_sheet("Giderler")
        ws2.append(["Ay", "Reklam", None, None, "Ay", "İşletme"])
        for row in expense_rows:
            ws2.append(row)
    wb.save(path)
    return path


def test_parse_sales_sheet(tmp_path):
    path = _write_workbook(tmp_path / "veri.xlsx", [
        ["Trendyol", "05.01.2025", " 2025 Ocak ", "SP1", "Teslim Edildi", "KZK-001", "Giyim",
         "Keten Gömlek", 2, 320, 899.8, 189, 42.5, 0, 0, 8.49, 1],
        [None, None, "2025 Ocak", "SP2", "İade Edildi", "AKS-010", None,
         "Kartlık", "bir", "abc", "1.234,50", None, None, 30, None, None, None],
        [None] * 17,
    ])
    records, expenses = parse_workbook(path)

    assert len(records) == 2
    first, second = records
    assert first.platform == "Trendyol"
    assert first.period == "2025 Ocak"
    assert first.quantity == 2
    assert first.order_amount == 899.8
    assert first.platform_fee == 8.49

    assert second.platform == "Diğer"
    assert second.product_group == "Genel"
    assert second.is_return
    assert second.quantity == 0
    assert second.purchase_cost == 0
    assert second.order_amount == 1234.5
    assert second.return_shipping_cost == 30
    assert second.effective_order_count == 1
    assert expenses == {}


def test_parse_expense_sheet_sums_repeated_months(tmp_path):
    path = _write_workbook(
        tmp_path / "veri.xlsx",
        [["Trendyol", None, "2025 Ocak", None, None, None, None, "x", 1, 0, 100, 0, 0, 0, 0, 0, 1]],
        [
            ["2025 Ocak", 1000, None, None, "2025 Ocak", 150000],
            ["2025 Ocak", 500, None, None, "2025 Şubat", 140000],
            [None, None, None, None, "2025 Şubat", "₺10,5"],
        ],
    )
    _, expenses = parse_workbook(path)

    assert expenses["2025 Ocak"] == MonthlyExpense(marketing=1500, operations=150000)
    assert expenses["2025 Şubat"] == MonthlyExpense(marketing=0, operations=140010.5)


def test_invalid_workbook_raises(tmp_path):
    bad = tmp_path / "bozuk.xlsx"
    bad.write_text("excel degil")
    with pytest.raises(WorkbookError):
        parse_workbook(bad)


def test_snapshot_round_trip_keeps_metrics(sample_records, expenses):
    text = dump_snapshot(sample_records, expenses)
    records, restored = load_snapshot(text)

    assert records == sample_records
    assert restored == expenses
    for period in (ALL, "2025 Ocak", "2025 Şubat"):
        for platform in (ALL, "Trendyol", "N11"):
            before = calculate_metrics(filter_records(sample_records, period, platform),
                                       expenses, period, platform)
            after = calculate_metrics(filter_records(records, period, platform),
                                      restored, period, platform)
            assert before == after


def test_snapshot_uses_original_keys(sample_records, expenses):
    data = json.loads(dump_snapshot(sample_records[:1], expenses))
    row = data["sales"][0]
    assert row["Platform"] == "Trendyol"
    assert row["Ay"] == "2025 Ocak"
    assert row["SiparisTutari"] == 1200
    assert data["expenses"]["2025 Ocak"] == {"marketing": 100, "operations": 1000}


def test_snapshot_keeps_blank_labels(make_record):
    records = [make_record(platform="", product_group="", order_amount=100)]
    restored, _ = load_snapshot(dump_snapshot(records, {}))

    assert restored == records
    assert [c.name for c in get_category_stats(restored)] == ["Diğer"]


def test_snapshot_missing_expenses_defaults_to_empty():
    records, expenses = load_snapshot('{"sales": [{"Platform": "N11", "Ay": "2025 Mart"}]}')
    assert records == [
        OrderRecord(platform="N11", period="2025 Mart", product_group="", order_count=0)
    ]
    assert expenses == {}


@pytest.mark.parametrize("text", ["{bozuk", '{"sales": {}}', "[]", '{"expenses": {}}'])
def test_invalid_snapshot(text):
    with pytest.raises(SnapshotError):
        load_snapshot(text)


def test_snapshot_filename():
    from datetime import date
    assert snapshot_filename(date(2025, 3, 9)) == "eticaret-yedek-2025-03-09.json"

"""
Excel kâr/zarar raporu yazıcı.
6 sayfa: OZET, KANALLAR, KATEGORILER, IADELER, KARSILASTIRMA, SATISLAR
"""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Sequence

from openpyxl import Workbook
from openpyxl.chart import BarChart, PieChart, Reference
from openpyxl.chart.label import DataLabelList
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ecommerce_finance.config.settings import ALL, REPORT_DATE_FORMAT
from ecommerce_finance.engine.analyzer import (
    calculate_metrics,
    filter_records,
    get_category_stats,
    get_channel_revenue,
    get_expense_breakdown,
    get_return_stats,
)
from ecommerce_finance.engine.comparison import compare_months
from ecommerce_finance.engine.periods import (
    default_comparison_pair,
    unique_periods,
    unique_platforms,
)
from ecommerce_finance.models.expense import ExpenseTable
from ecommerce_finance.models.order import OrderRecord

logger = logging.getLogger(__name__)

# ── Stil Sabitleri ────────────────────────────────────────
HEADER_FILL = PatternFill(start_color="4F46E5", end_color="4F46E5", fill_type="solid")
HEADER_FONT = Font(name="Calibri", bold=True, color="FFFFFF", size=11)
TITLE_FONT = Font(name="Calibri", bold=True, size=14, color="4F46E5")
SUBTITLE_FONT = Font(name="Calibri", bold=True, size=11, color="444444")
NORMAL_FONT = Font(name="Calibri", size=10)
MONEY_FORMAT = '#,##0.00 "₺"'
PERCENT_FORMAT = '0.0%'
THIN_BORDER = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)

KPI_FILLS = {
    "green": PatternFill(start_color="E8F5E9", end_color="E8F5E9", fill_type="solid"),
    "blue": PatternFill(start_color="E3F2FD", end_color="E3F2FD", fill_type="solid"),
    "orange": PatternFill(start_color="FFF3E0", end_color="FFF3E0", fill_type="solid"),
    "red": PatternFill(start_color="FFEBEE", end_color="FFEBEE", fill_type="solid"),
    "purple": PatternFill(start_color="F3E5F5", end_color="F3E5F5", fill_type="solid"),
}
RETURN_FILL = PatternFill(start_color="FFCDD2", end_color="FFCDD2", fill_type="solid")
TOTAL_FILL = PatternFill(start_color="E0E0E0", end_color="E0E0E0", fill_type="solid")
POSITIVE_FONT = Font(name="Calibri", color="2E7D32", bold=True)
NEGATIVE_FONT = Font(name="Calibri", color="C62828", bold=True)


def _apply_header_row(ws, row: int, col_start: int, col_end: int):
    """Başlık satırına stil uygular."""
    for col in range(col_start, col_end + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = THIN_BORDER


def _apply_data_row(ws, row: int, col_start: int, col_end: int):
    """Veri satırına stil uygular."""
    for col in range(col_start, col_end + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = NORMAL_FONT
        cell.border = THIN_BORDER
        cell.alignment = Alignment(vertical="center")


def _write_headers(ws, row: int, headers: list[str], col_start: int = 1):
    for i, h in enumerate(headers, col_start):
        ws.cell(row=row, column=i, value=h)
    _apply_header_row(ws, row, col_start, col_start + len(headers) - 1)


def _auto_width(ws, min_width: int = 10, max_width: int = 45):
    """Sütun genişliklerini otomatik ayarlar."""
    for col_cells in ws.columns:
        max_len = min_width
        col_letter = get_column_letter(col_cells[0].column)
        for cell in col_cells:
            if cell.value:
                cell_len = len(str(cell.value))
                if cell_len > max_len:
                    max_len = min(cell_len + 2, max_width)
        ws.column_dimensions[col_letter].width = max_len


def _period_label(period: str) -> str:
    return "Tüm Zamanlar" if period == ALL else period


def generate_report(
    records: Sequence[OrderRecord],
    expenses: ExpenseTable,
    output_path: Path,
    period: str = ALL,
) -> Path:
    """
    Excel kâr/zarar raporu oluşturur. Karşılaştırma sayfası seçili aydan
    bağımsız olarak verideki son iki ayı kullanır.

    Returns: oluşturulan dosya yolu
    """
    scoped = filter_records(records, period=period)
    wb = Workbook()

    _write_summary_sheet(wb, scoped, expenses, period)
    _write_channel_sheet(wb, scoped, expenses, period)
    _write_category_sheet(wb, scoped)
    _write_returns_sheet(wb, scoped)
    _write_comparison_sheet(wb, records, expenses)
    _write_sales_sheet(wb, scoped)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)
    logger.info("Excel raporu yazildi: %s (%d satir)", output_path, len(scoped))
    return output_path


# ══════════════════════════════════════════════════════════
#  SAYFA 1: ÖZET
# ══════════════════════════════════════════════════════════
def _write_summary_sheet(wb, records, expenses, period):
    ws = wb.active
    ws.title = "OZET"
    ws.sheet_properties.tabColor = "4F46E5"

    metrics = calculate_metrics(records, expenses, period, ALL)

    ws.merge_cells("A1:D1")
    ws["A1"] = "E-Ticaret Kâr/Zarar Raporu"
    ws["A1"].font = TITLE_FONT
    ws["A1"].alignment = Alignment(horizontal="center")

    ws.merge_cells("A2:D2")
    ws["A2"] = f"Rapor Tarihi: {date.today().strftime(REPORT_DATE_FORMAT)} | Dönem: {_period_label(period)}"
    ws["A2"].font = SUBTITLE_FONT
    ws["A2"].alignment = Alignment(horizontal="center")

    # ── KPI Kartları ──
    row = 4
    kpis = [
        ("Ciro (KDV Dahil)", metrics.revenue_inc_vat, "blue", MONEY_FORMAT),
        ("Ciro (KDV Hariç)", metrics.revenue_ex_vat, "blue", MONEY_FORMAT),
        ("Ürün Maliyeti", metrics.cost_of_goods, "orange", MONEY_FORMAT),
        ("Brüt Kâr", metrics.gross_profit, "green", MONEY_FORMAT),
        ("Net Kâr", metrics.net_profit, "green" if metrics.net_profit >= 0 else "red", MONEY_FORMAT),
        ("Toplam Giderler", metrics.total_expenses, "orange", MONEY_FORMAT),
        ("İade Ciro Kaybı", metrics.return_loss, "red", MONEY_FORMAT),
        ("Teslim Edilen Sipariş", metrics.delivered_order_count, "purple", None),
        ("İade Edilen Sipariş", metrics.returned_order_count, "purple", None),
        ("Teslim Edilen Ürün", metrics.delivered_product_qty, "purple", None),
        ("İade Edilen Ürün", metrics.returned_product_qty, "purple", None),
    ]

    _write_headers(ws, row, ["Metrik", "Değer"])
    for metric_name, value, color, fmt in kpis:
        row += 1
        ws.cell(row=row, column=1, value=metric_name)
        ws.cell(row=row, column=1).font = Font(name="Calibri", bold=True, size=10)
        cell = ws.cell(row=row, column=2, value=value)
        if fmt:
            cell.number_format = fmt
        for col in range(1, 3):
            ws.cell(row=row, column=col).fill = KPI_FILLS[color]
            ws.cell(row=row, column=col).border = THIN_BORDER

    # ── Gider Dağılımı ──
    row += 2
    ws.cell(row=row, column=1, value="Gider Dağılımı")
    ws.cell(row=row, column=1).font = SUBTITLE_FONT
    row += 1
    breakdown_header = row
    _write_headers(ws, row, ["Kalem", "Tutar"])

    breakdown = get_expense_breakdown(metrics)
    for item in breakdown:
        row += 1
        ws.cell(row=row, column=1, value=item.name)
        ws.cell(row=row, column=2, value=item.value).number_format = MONEY_FORMAT
        _apply_data_row(ws, row, 1, 2)

    if breakdown:
        chart = PieChart()
        chart.title = "Gider Dağılımı"
        chart.width = 16
        chart.height = 10
        data_ref = Reference(ws, min_col=2, min_row=breakdown_header, max_row=row)
        cats_ref = Reference(ws, min_col=1, min_row=breakdown_header + 1, max_row=row)
        chart.add_data(data_ref, titles_from_data=True)
        chart.set_categories(cats_ref)
        chart.dataLabels = DataLabelList()
        chart.dataLabels.showPercent = True
        chart.dataLabels.showVal = False
        ws.add_chart(chart, f"E{breakdown_header}")

    # ── Kanal Cirosu ──
    row += 2
    ws.cell(row=row, column=1, value="Kanal Bazlı Ciro")
    ws.cell(row=row, column=1).font = SUBTITLE_FONT
    row += 1
    channel_header = row
    _write_headers(ws, row, ["Kanal", "Ciro"])

    channels = get_channel_revenue(records)
    for ch in channels:
        row += 1
        ws.cell(row=row, column=1, value=ch.name)
        ws.cell(row=row, column=2, value=ch.value).number_format = MONEY_FORMAT
        _apply_data_row(ws, row, 1, 2)

    if channels:
        chart = BarChart()
        chart.type = "bar"
        chart.title = "Kanal Cirosu"
        chart.width = 16
        chart.height = 8
        data_ref = Reference(ws, min_col=2, min_row=channel_header, max_row=row)
        cats_ref = Reference(ws, min_col=1, min_row=channel_header + 1, max_row=row)
        chart.add_data(data_ref, titles_from_data=True)
        chart.set_categories(cats_ref)
        ws.add_chart(chart, f"E{channel_header + 12}")

    _auto_width(ws)


# ══════════════════════════════════════════════════════════
#  SAYFA 2: KANALLAR
# ══════════════════════════════════════════════════════════
def _write_channel_sheet(wb, records, expenses, period):
    ws = wb.create_sheet("KANALLAR")
    ws.sheet_properties.tabColor = "10B981"

    headers = [
        "Kanal", "Ciro (KDV Dahil)", "Ciro (KDV Hariç)", "Ürün Maliyeti",
        "Komisyon", "Kargo", "Platform & Ceza", "Brüt Kâr", "Net Kâr",
        "Teslim Sipariş", "İade Sipariş", "İade Oranı",
    ]
    _write_headers(ws, 1, headers)

    row = 1
    for platform in unique_platforms(records):
        row += 1
        m = calculate_metrics(filter_records(records, platform=platform), expenses, period, platform)
        values = [
            platform,
            m.revenue_inc_vat,
            m.revenue_ex_vat,
            m.cost_of_goods,
            abs(m.commission),
            abs(m.shipping),
            abs(m.platform_expense) + abs(m.penalty),
            m.gross_profit,
            m.net_profit,
            m.delivered_order_count,
            m.returned_order_count,
            m.return_rate / 100,
        ]
        for col, val in enumerate(values, 1):
            ws.cell(row=row, column=col, value=val)
        _apply_data_row(ws, row, 1, len(headers))
        for col in range(2, 10):
            ws.cell(row=row, column=col).number_format = MONEY_FORMAT
        ws.cell(row=row, column=12).number_format = PERCENT_FORMAT
        ws.cell(row=row, column=9).font = POSITIVE_FONT if m.net_profit >= 0 else NEGATIVE_FONT

    ws.freeze_panes = "A2"
    _auto_width(ws)


# ══════════════════════════════════════════════════════════
#  SAYFA 3: KATEGORİLER
# ══════════════════════════════════════════════════════════
def _write_category_sheet(wb, records):
    ws = wb.create_sheet("KATEGORILER")
    ws.sheet_properties.tabColor = "F59E0B"

    headers = ["Ürün Grubu", "Ciro", "Adet", "En Çok Satanlar"]
    _write_headers(ws, 1, headers)

    row = 1
    for cat in get_category_stats(records):
        row += 1
        top = ", ".join(f"{p.name} ({p.qty})" for p in cat.top_products)
        ws.cell(row=row, column=1, value=cat.name)
        ws.cell(row=row, column=2, value=cat.revenue).number_format = MONEY_FORMAT
        ws.cell(row=row, column=3, value=cat.qty)
        ws.cell(row=row, column=4, value=top)
        _apply_data_row(ws, row, 1, len(headers))

    ws.freeze_panes = "A2"
    _auto_width(ws, max_width=80)


# ══════════════════════════════════════════════════════════
#  SAYFA 4: İADELER
# ══════════════════════════════════════════════════════════
def _write_returns_sheet(wb, records):
    ws = wb.create_sheet("IADELER")
    ws.sheet_properties.tabColor = "F43F5E"

    stats = get_return_stats(records)

    ws.cell(row=1, column=1, value="En Çok İade Edilen (Adet)").font = SUBTITLE_FONT
    ws.cell(row=1, column=5, value="En Çok Ciro Kaybettiren").font = SUBTITLE_FONT
    _write_headers(ws, 2, ["Ürün", "Adet", "Kayıp Tutar"], col_start=1)
    _write_headers(ws, 2, ["Ürün", "Adet", "Kayıp Tutar"], col_start=5)

    for offset, items in ((1, stats.by_quantity), (5, stats.by_amount)):
        for i, item in enumerate(items):
            row = 3 + i
            ws.cell(row=row, column=offset, value=item.name)
            ws.cell(row=row, column=offset + 1, value=item.qty)
            ws.cell(row=row, column=offset + 2, value=item.lost_amount).number_format = MONEY_FORMAT
            _apply_data_row(ws, row, offset, offset + 2)
            ws.cell(row=row, column=offset).fill = RETURN_FILL

    if not stats.by_quantity:
        ws.cell(row=3, column=1, value="İade kaydı yok")

    _auto_width(ws)


# ══════════════════════════════════════════════════════════
#  SAYFA 5: KARŞILAŞTIRMA
# ══════════════════════════════════════════════════════════
def _write_comparison_sheet(wb, records, expenses):
    pair = default_comparison_pair(unique_periods(records))
    if pair is None:
        return

    result = compare_months(records, expenses, *pair)
    if result is None:
        return

    ws = wb.create_sheet("KARSILASTIRMA")
    ws.sheet_properties.tabColor = "8B5CF6"

    headers = ["Metrik", result.period_a, result.period_b, "Fark"]
    _write_headers(ws, 1, headers)

    row = 1
    for chart_row in result.rows:
        row += 1
        a = chart_row.values[result.period_a]
        b = chart_row.values[result.period_b]
        ws.cell(row=row, column=1, value=chart_row.name)
        ws.cell(row=row, column=2, value=a)
        ws.cell(row=row, column=3, value=b)
        diff = ws.cell(row=row, column=4, value=b - a)
        for col in range(2, 5):
            ws.cell(row=row, column=col).number_format = MONEY_FORMAT
        _apply_data_row(ws, row, 1, 4)
        diff.font = POSITIVE_FONT if b - a >= 0 else NEGATIVE_FONT
    last_chart_row = row

    row += 1
    ws.cell(row=row, column=1, value="Toplam Sipariş")
    ws.cell(row=row, column=2, value=result.metrics_a.total_order_count)
    ws.cell(row=row, column=3, value=result.metrics_b.total_order_count)
    ws.cell(row=row, column=4, value=result.diff_orders)
    _apply_data_row(ws, row, 1, 4)

    chart = BarChart()
    chart.type = "col"
    chart.title = f"{result.period_a} / {result.period_b}"
    chart.y_axis.title = "Tutar (₺)"
    chart.width = 20
    chart.height = 10
    data_ref = Reference(ws, min_col=2, max_col=3, min_row=1, max_row=last_chart_row)
    cats_ref = Reference(ws, min_col=1, min_row=2, max_row=last_chart_row)
    chart.add_data(data_ref, titles_from_data=True)
    chart.set_categories(cats_ref)
    ws.add_chart(chart, "F2")

    _auto_width(ws)


# ══════════════════════════════════════════════════════════
#  SAYFA 6: SATIŞLAR
# ══════════════════════════════════════════════════════════
def _write_sales_sheet(wb, records):
    ws = wb.create_sheet("SATISLAR")
    ws.sheet_properties.tabColor = "3B82F6"

    headers = [
        "Ay", "Platform", "Sipariş No", "Ürün Kodu", "Ürün Grubu", "Ürün",
        "Adet", "Tutar", "Maliyet", "Komisyon", "Kargo", "Ceza",
        "Platform Gideri", "Durum",
    ]
    _write_headers(ws, 1, headers)

    for row_idx, r in enumerate(records, 2):
        values = [
            r.period,
            r.platform,
            r.order_no,
            r.product_code,
            r.product_group,
            r.product_description,
            r.quantity,
            r.order_amount,
            r.purchase_cost,
            r.commission,
            r.total_shipping,
            r.penalty_fee,
            r.platform_fee,
            "İade" if r.is_return else "Satış",
        ]
        for col, val in enumerate(values, 1):
            cell = ws.cell(row=row_idx, column=col, value=val)
            cell.font = NORMAL_FONT
            cell.border = THIN_BORDER

        for col in range(8, 14):
            ws.cell(row=row_idx, column=col).number_format = MONEY_FORMAT
        if r.is_return:
            ws.cell(row=row_idx, column=14).fill = RETURN_FILL

    # Toplam satırı
    total_row = len(records) + 2
    ws.cell(row=total_row, column=1, value="TOPLAM")
    ws.cell(row=total_row, column=7, value=sum(r.quantity for r in records))
    for col, attr in ((8, "order_amount"), (9, "purchase_cost"), (10, "commission"),
                      (12, "penalty_fee"), (13, "platform_fee")):
        ws.cell(row=total_row, column=col, value=sum(getattr(r, attr) for r in records))
        ws.cell(row=total_row, column=col).number_format = MONEY_FORMAT
    ws.cell(row=total_row, column=11, value=sum(r.total_shipping for r in records))
    ws.cell(row=total_row, column=11).number_format = MONEY_FORMAT

    for col in range(1, len(headers) + 1):
        cell = ws.cell(row=total_row, column=col)
        cell.font = Font(name="Calibri", bold=True)
        cell.border = THIN_BORDER
        cell.fill = TOTAL_FILL

    ws.auto_filter.ref = f"A1:{get_column_letter(len(headers))}{max(total_row - 1, 1)}"
    ws.freeze_panes = "A2"
    _auto_width(ws)

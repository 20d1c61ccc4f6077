"""
İki ayın finansal özetini yan yana karşılaştırır.
"""
from __future__ import annotations

from typing import Optional, Sequence

from ecommerce_finance.config.settings import ALL
from ecommerce_finance.engine.analyzer import calculate_metrics, filter_records
from ecommerce_finance.models.expense import ExpenseTable
from ecommerce_finance.models.order import OrderRecord
from ecommerce_finance.models.summary import ComparisonResult, ComparisonRow


def compare_months(
    records: Sequence[OrderRecord],
    expenses: ExpenseTable,
    period_a: str,
    period_b: str,
) -> Optional[ComparisonResult]:
    """
    period_a ve period_b için özet hesaplar; farklar B - A olarak verilir.
    Aylardan biri seçilmemişse None döner.
    """
    if not period_a or not period_b:
        return None

    m1 = calculate_metrics(filter_records(records, period=period_a), expenses, period_a, ALL)
    m2 = calculate_metrics(filter_records(records, period=period_b), expenses, period_b, ALL)

    rows = [
        ComparisonRow("Ciro (TL)", {
            period_a: m1.revenue_inc_vat,
            period_b: m2.revenue_inc_vat,
        }),
        ComparisonRow("Net Kâr (TL)", {
            period_a: m1.net_profit,
            period_b: m2.net_profit,
        }),
        ComparisonRow("Giderler (TL)", {
            period_a: m1.revenue_inc_vat - m1.net_profit,
            period_b: m2.revenue_inc_vat - m2.net_profit,
        }),
    ]

    return ComparisonResult(
        period_a=period_a,
        period_b=period_b,
        metrics_a=m1,
        metrics_b=m2,
        diff_revenue=m2.revenue_inc_vat - m1.revenue_inc_vat,
        diff_profit=m2.net_profit - m1.net_profit,
        diff_orders=m2.total_order_count - m1.total_order_count,
        rows=rows,
    )

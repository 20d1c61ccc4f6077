"""
Sipariş satırlarını ve sabit giderleri analiz eder, finansal özet ve
görünüm verileri üretir. Tüm fonksiyonlar saftır; girdileri değiştirmez.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from ecommerce_finance.config.settings import ALL, CATEGORY_FALLBACK, TOP_N, VAT_DIVISOR
from ecommerce_finance.models.expense import ExpenseTable
from ecommerce_finance.models.order import OrderRecord
from ecommerce_finance.models.summary import (
    CategoryStat,
    ChannelRevenue,
    ExpenseItem,
    FinancialSummary,
    ProductQuantity,
    ProductSearchMetrics,
    ReturnStat,
    ReturnStats,
)


def turkish_lower(text: str) -> str:
    """Türkçe kurallarla küçük harf: 'İ' → 'i', 'I' → 'ı'."""
    return text.replace("İ", "i").replace("I", "ı").lower()


# ── Filtreler ─────────────────────────────────────────────
def filter_records(
    records: Iterable[OrderRecord],
    period: str = ALL,
    platform: str = ALL,
) -> list[OrderRecord]:
    """Ay ve platform eşitliğine göre süzer. ALL filtresi uygulanmaz."""
    return [
        r for r in records
        if (period == ALL or r.period == period)
        and (platform == ALL or r.platform == platform)
    ]


def search_records(records: Iterable[OrderRecord], term: str) -> list[OrderRecord]:
    """Ürün kodu veya açıklamasında büyük/küçük harf duyarsız arama."""
    records = list(records)
    if not term or not term.strip():
        return records

    query = turkish_lower(term)
    return [
        r for r in records
        if query in turkish_lower(r.product_code) or query in turkish_lower(r.product_description)
    ]


# ── Finansal Özet ─────────────────────────────────────────
def calculate_metrics(
    records: Sequence[OrderRecord],
    expenses: ExpenseTable,
    period: str = ALL,
    platform: str = ALL,
) -> FinancialSummary:
    """
    Önceden süzülmüş satırlardan kâr/zarar özetini hesaplar.

    period/platform burada satır süzmek için değil, yalnızca sabit giderlerin
    dahil edilip edilmeyeceğine karar vermek için kullanılır. Reklam ve işletme
    giderleri tek bir kanala ait olmadığından kanal seçiliyken sıfırdır.
    """
    revenue_inc_vat = 0.0
    cost_of_goods = 0.0
    commission = 0.0
    shipping = 0.0
    penalty = 0.0
    platform_expense = 0.0
    return_loss = 0.0

    delivered_orders = 0
    returned_orders = 0
    delivered_qty = 0
    returned_qty = 0

    for r in records:
        commission += r.commission
        shipping += r.total_shipping
        penalty += r.penalty_fee
        platform_expense += r.platform_fee

        if r.is_return:
            return_loss += r.order_amount
            returned_orders += r.effective_order_count
            returned_qty += r.quantity
        else:
            revenue_inc_vat += r.order_amount
            cost_of_goods += r.purchase_cost
            delivered_orders += r.effective_order_count
            delivered_qty += r.quantity

    marketing = 0.0
    operations = 0.0
    if platform == ALL:
        if period == ALL:
            for exp in expenses.values():
                marketing += exp.marketing
                operations += exp.operations
        elif period in expenses:
            marketing = expenses[period].marketing
            operations = expenses[period].operations

    revenue_ex_vat = revenue_inc_vat / VAT_DIVISOR
    gross_profit = revenue_ex_vat - cost_of_goods
    variable = commission + shipping + penalty + platform_expense
    net_profit = gross_profit - variable - marketing - operations

    return FinancialSummary(
        revenue_inc_vat=revenue_inc_vat,
        revenue_ex_vat=revenue_ex_vat,
        cost_of_goods=cost_of_goods,
        gross_profit=gross_profit,
        net_profit=net_profit,
        commission=commission,
        shipping=shipping,
        penalty=penalty,
        platform_expense=platform_expense,
        marketing_expense=marketing,
        operating_expense=operations,
        return_loss=return_loss,
        delivered_order_count=delivered_orders,
        returned_order_count=returned_orders,
        delivered_product_qty=delivered_qty,
        returned_product_qty=returned_qty,
    )


# ── Gider Dağılımı ────────────────────────────────────────
def get_expense_breakdown(summary: FinancialSummary) -> list[ExpenseItem]:
    """Genel bakış gider pastası. Sıfır olan kalemler çıkarılır."""
    items = [
        ExpenseItem("Komisyon", abs(summary.commission)),
        ExpenseItem("Kargo", abs(summary.shipping)),
        ExpenseItem("Reklam", summary.marketing_expense),
        ExpenseItem("İşletme", summary.operating_expense),
        ExpenseItem("Ceza", abs(summary.penalty)),
        ExpenseItem("Platform", abs(summary.platform_expense)),
        ExpenseItem("İade (Ciro Kaybı)", summary.return_loss),
    ]
    return [i for i in items if i.value > 0]


def get_channel_expense_breakdown(summary: FinancialSummary) -> list[ExpenseItem]:
    """Kanal analizi gider dağılımı (ürün maliyeti dahil)."""
    items = [
        ExpenseItem("Ürün Maliyeti (COGS)", summary.cost_of_goods),
        ExpenseItem("Komisyon", abs(summary.commission)),
        ExpenseItem("Kargo", abs(summary.shipping)),
        ExpenseItem("Platform & Ceza", abs(summary.platform_expense) + abs(summary.penalty)),
    ]
    return [i for i in items if i.value > 0]


def get_income_statement(summary: FinancialSummary) -> list[ExpenseItem]:
    """
    Genel bakıştaki gelir tablosu satırları, yukarıdan aşağıya.

    Gider satırları pozitif tutarla verilir; "(-)" öneki düşüldüklerini
    gösterir. Sıfır satırlar da listede kalır.
    """
    return [
        ExpenseItem("Toplam Ciro (KDV Dahil)", summary.revenue_inc_vat),
        ExpenseItem("Toplam Ciro (KDV Hariç)", summary.revenue_ex_vat),
        ExpenseItem("(-) Alış Maliyeti (COGS)", summary.cost_of_goods),
        ExpenseItem("BRÜT KAR", summary.gross_profit),
        ExpenseItem("(-) Operasyonel Giderler", summary.operational_expenses),
        ExpenseItem("(-) Reklam Gideri", summary.marketing_expense),
        ExpenseItem("(-) İşletme Gideri", summary.operating_expense),
        ExpenseItem("NET KAR", summary.net_profit),
    ]


def revenue_share(value: float, total: float) -> float:
    """Toplam cirodaki pay (%). Toplam sıfır veya negatifse 0."""
    if total <= 0:
        return 0.0
    return value / total * 100


# ── Gruplamalar ───────────────────────────────────────────
def get_channel_revenue(records: Iterable[OrderRecord]) -> list[ChannelRevenue]:
    """İade olmayan satırların platform bazında cirosu, büyükten küçüğe."""
    stats: dict[str, float] = defaultdict(float)
    for r in records:
        if not r.is_return:
            stats[r.platform] += r.order_amount

    return sorted(
        (ChannelRevenue(name, value) for name, value in stats.items()),
        key=lambda x: x.value,
        reverse=True,
    )


def _top_quantities(tally: dict[str, int], limit: int) -> list[ProductQuantity]:
    ranked = sorted(tally.items(), key=lambda x: x[1], reverse=True)
    return [ProductQuantity(name, qty) for name, qty in ranked[:limit]]


def get_category_stats(
    records: Iterable[OrderRecord],
    top_n: int = TOP_N,
) -> list[CategoryStat]:
    """Ürün grubu bazında ciro/adet ve her grubun en çok satan ürünleri."""
    stats: dict[str, dict] = defaultdict(
        lambda: {"revenue": 0.0, "qty": 0, "products": defaultdict(int)}
    )

    for r in records:
        if r.is_return:
            continue
        group = stats[r.product_group or CATEGORY_FALLBACK]
        group["revenue"] += r.order_amount
        group["qty"] += r.quantity
        group["products"][r.product_description] += r.quantity

    categories = [
        CategoryStat(
            name=name,
            revenue=data["revenue"],
            qty=data["qty"],
            top_products=_top_quantities(data["products"], top_n),
        )
        for name, data in stats.items()
    ]
    return sorted(categories, key=lambda c: c.revenue, reverse=True)


def get_return_stats(
    records: Iterable[OrderRecord],
    top_n: int = TOP_N,
) -> ReturnStats:
    """En çok iade edilen ürünler: adede göre ve kayıp tutara göre."""
    stats: dict[str, dict] = defaultdict(lambda: {"qty": 0, "lost_amount": 0.0})

    for r in records:
        if not r.is_return:
            continue
        product = stats[r.product_description]
        product["qty"] += r.quantity or 1
        product["lost_amount"] += r.order_amount

    rows = [ReturnStat(name, data["qty"], data["lost_amount"]) for name, data in stats.items()]
    return ReturnStats(
        by_quantity=sorted(rows, key=lambda x: x.qty, reverse=True)[:top_n],
        by_amount=sorted(rows, key=lambda x: x.lost_amount, reverse=True)[:top_n],
    )


def get_top_products(
    records: Iterable[OrderRecord],
    top_n: int = TOP_N,
) -> list[ProductQuantity]:
    """Adede göre en çok satan ürünler."""
    tally: dict[str, int] = defaultdict(int)
    for r in records:
        if not r.is_return:
            tally[r.product_description] += r.quantity
    return _top_quantities(tally, top_n)


def get_product_search_metrics(records: Iterable[OrderRecord]) -> ProductSearchMetrics:
    """Arama sonucundaki satış adedi, ciro ve iade adedi."""
    total_qty = 0
    total_revenue = 0.0
    total_return_qty = 0

    for r in records:
        if r.is_return:
            total_return_qty += r.quantity
        else:
            total_qty += r.quantity
            total_revenue += r.order_amount

    return ProductSearchMetrics(
        total_qty=total_qty,
        total_revenue=total_revenue,
        total_return_qty=total_return_qty,
    )

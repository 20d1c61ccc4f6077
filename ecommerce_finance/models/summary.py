"""
Finansal özet ve görünüm verileri - Dashboard, CLI ve raporlar için.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class FinancialSummary:
    """Filtrelenmiş sipariş satırlarının kâr/zarar özeti."""
    revenue_inc_vat: float = 0.0
    revenue_ex_vat: float = 0.0
    cost_of_goods: float = 0.0
    gross_profit: float = 0.0
    net_profit: float = 0.0

    commission: float = 0.0
    shipping: float = 0.0              # kargo + iade kargo
    penalty: float = 0.0
    platform_expense: float = 0.0
    marketing_expense: float = 0.0
    operating_expense: float = 0.0
    return_loss: float = 0.0           # iadeler nedeniyle kaybedilen ciro

    delivered_order_count: int = 0
    returned_order_count: int = 0
    delivered_product_qty: int = 0
    returned_product_qty: int = 0

    @property
    def total_order_count(self) -> int:
        return self.delivered_order_count + self.returned_order_count

    @property
    def total_variable_expenses(self) -> float:
        return self.commission + self.shipping + self.penalty + self.platform_expense

    @property
    def operational_expenses(self) -> float:
        """Komisyon, kargo, ceza ve platform giderlerinin mutlak toplamı."""
        return (
            abs(self.commission) + abs(self.shipping) + abs(self.penalty)
            + abs(self.platform_expense)
        )

    @property
    def total_expenses(self) -> float:
        """Genel bakıştaki "Toplam Giderler" kartı (tutarlar mutlak değerle)."""
        return self.operational_expenses + self.marketing_expense + self.operating_expense

    @property
    def channel_expenses(self) -> float:
        """Kanal analizindeki 'Toplam Gider' kartı."""
        return abs(self.commission) + abs(self.shipping) + self.cost_of_goods

    @property
    def return_rate(self) -> float:
        """İade edilen sipariş oranı (%)."""
        if self.total_order_count == 0:
            return 0.0
        return (self.returned_order_count / self.total_order_count) * 100

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ChannelRevenue:
    name: str
    value: float


@dataclass(frozen=True)
class ExpenseItem:
    name: str
    value: float


@dataclass(frozen=True)
class ProductQuantity:
    name: str
    qty: int


@dataclass(frozen=True)
class CategoryStat:
    name: str
    revenue: float
    qty: int
    top_products: list[ProductQuantity] = field(default_factory=list)


@dataclass(frozen=True)
class ReturnStat:
    name: str
    qty: int
    lost_amount: float


@dataclass(frozen=True)
class ReturnStats:
    by_quantity: list[ReturnStat] = field(default_factory=list)
    by_amount: list[ReturnStat] = field(default_factory=list)


@dataclass(frozen=True)
class ProductSearchMetrics:
    total_qty: int = 0
    total_revenue: float = 0.0
    total_return_qty: int = 0


@dataclass(frozen=True)
class ComparisonRow:
    """Grafik satırı: metrik adı → {ay: değer}."""
    name: str
    values: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ComparisonResult:
    period_a: str
    period_b: str
    metrics_a: FinancialSummary
    metrics_b: FinancialSummary
    diff_revenue: float
    diff_profit: float
    diff_orders: int
    rows: list[ComparisonRow] = field(default_factory=list)

import pytest

from ecommerce_finance.config.settings import RETURN_STATUS
from ecommerce_finance.models.expense import MonthlyExpense
from ecommerce_finance.models.order import OrderRecord


@pytest.fixture
def make_record():
    def _make(**overrides):
        values = dict(
            platform="Trendyol",
            period="2025 Ocak",
            order_status="Teslim Edildi",
            product_group="Giyim",
            product_code="KZK-001",
            product_description="Keten Gömlek",
            quantity=1,
            order_amount=0.0,
            order_count=1,
        )
        if overrides.pop("returned", False):
            values["order_status"] = RETURN_STATUS
        values.update(overrides)
        return OrderRecord(**values)

    return _make


@pytest.fixture
def sample_records(make_record):
    return [
        make_record(platform="Trendyol", period="2025 Ocak", order_amount=1200, purchase_cost=400,
                    commission=200, shipping_cost=40, quantity=2, product_description="Gömlek"),
        make_record(platform="Hepsiburada", period="2025 Ocak", order_amount=600, purchase_cost=250,
                    commission=90, shipping_cost=35, quantity=1, product_description="Jean"),
        make_record(platform="Trendyol", period="2025 Şubat", order_amount=300, purchase_cost=100,
                    commission=50, shipping_cost=30, return_shipping_cost=30, quantity=1,
                    product_description="Gömlek", returned=True),
        make_record(platform="N11", period="2025 Şubat", order_amount=900, purchase_cost=300,
                    penalty_fee=25, platform_fee=8, quantity=3, product_description="Kolye",
                    product_group="Aksesuar"),
    ]


@pytest.fixture
def expenses():
    return {
        "2025 Ocak": MonthlyExpense(marketing=100, operations=1000),
        "2025 Şubat": MonthlyExpense(marketing=50, operations=1000),
    }

import pytest

from ecommerce_finance.config.settings import ALL
from ecommerce_finance.engine.analyzer import (
    calculate_metrics,
    get_category_stats,
    get_channel_expense_breakdown,
    get_channel_revenue,
    get_expense_breakdown,
    get_income_statement,
    get_product_search_metrics,
    get_return_stats,
    get_top_products,
    revenue_share,
    search_records,
    turkish_lower,
)
from ecommerce_finance.models.summary import FinancialSummary


def test_channel_revenue_sorted_and_skips_returns(sample_records):
    result = get_channel_revenue(sample_records)
    assert [(c.name, c.value) for c in result] == [
        ("Trendyol", 1200), ("N11", 900), ("Hepsiburada", 600),
    ]


def test_channel_revenue_ties_keep_first_seen_order(make_record):
    records = [
        make_record(platform="B", order_amount=100),
        make_record(platform="A", order_amount=100),
        make_record(platform="C", order_amount=300),
    ]
    assert [c.name for c in get_channel_revenue(records)] == ["C", "B", "A"]


def test_expense_breakdown_drops_zero_and_uses_abs():
    summary = FinancialSummary(commission=-50, shipping=20, marketing_expense=0,
                               operating_expense=100, penalty=0, platform_expense=-5,
                               return_loss=30)
    items = get_expense_breakdown(summary)
    assert [(i.name, i.value) for i in items] == [
        ("Komisyon", 50), ("Kargo", 20), ("İşletme", 100), ("Platform", 5),
        ("İade (Ciro Kaybı)", 30),
    ]
    assert all(i.value > 0 for i in items)


def test_channel_expense_breakdown(sample_records, expenses):
    summary = calculate_metrics(sample_records, expenses, ALL, ALL)
    items = {i.name: i.value for i in get_channel_expense_breakdown(summary)}
    assert items == {
        "Ürün Maliyeti (COGS)": 950,
        "Komisyon": 340,
        "Kargo": 135,
        "Platform & Ceza": 33,
    }


def test_category_stats(make_record):
    records = [
        make_record(product_group="Giyim", product_description="Gömlek", quantity=2, order_amount=200),
        make_record(product_group="Giyim", product_description="Jean", quantity=5, order_amount=100),
        make_record(product_group="Aksesuar", product_description="Kolye", quantity=1, order_amount=500),
        make_record(product_group="", product_description="Kupa", quantity=1, order_amount=10),
        make_record(product_group="Giyim", product_description="Jean", quantity=4, returned=True),
    ]
    stats = get_category_stats(records)

    assert [c.name for c in stats] == ["Aksesuar", "Giyim", "Diğer"]
    giyim = stats[1]
    assert giyim.revenue == 300
    assert giyim.qty == 7
    assert [(p.name, p.qty) for p in giyim.top_products] == [("Jean", 5), ("Gömlek", 2)]


def test_category_top_products_capped_at_five(make_record):
    records = [
        make_record(product_description=f"Ürün {i}", quantity=i, order_amount=1)
        for i in range(1, 9)
    ]
    top = get_category_stats(records)[0].top_products
    assert len(top) == 5
    assert [p.qty for p in top] == [8, 7, 6, 5, 4]


def test_return_stats(make_record):
    records = [
        make_record(product_description="A", quantity=0, order_amount=500, returned=True),
        make_record(product_description="B", quantity=3, order_amount=90, returned=True),
        make_record(product_description="A", quantity=1, order_amount=100, returned=True),
        make_record(product_description="C", quantity=9, order_amount=999),
    ]
    stats = get_return_stats(records)

    assert [(r.name, r.qty) for r in stats.by_quantity] == [("B", 3), ("A", 2)]
    assert [(r.name, r.lost_amount) for r in stats.by_amount] == [("A", 600), ("B", 90)]


def test_return_stats_capped_at_five(make_record):
    records = [
        make_record(product_description=f"Ürün {i}", quantity=i, order_amount=10 * i, returned=True)
        for i in range(1, 8)
    ]
    stats = get_return_stats(records)

    assert [r.qty for r in stats.by_quantity] == [7, 6, 5, 4, 3]
    assert [r.lost_amount for r in stats.by_amount] == [70, 60, 50, 40, 30]


def test_rankings_keep_first_seen_order_on_ties(make_record):
    records = [
        make_record(product_group="Ev", product_description="Kupa", quantity=1, order_amount=100),
        make_record(product_group="Giyim", product_description="Jean", quantity=1, order_amount=100),
        make_record(product_group="Aksesuar", product_description="Kolye", quantity=1, order_amount=100),
        make_record(product_description="Tabak", quantity=2, order_amount=50, returned=True),
        make_record(product_description="Bardak", quantity=2, order_amount=50, returned=True),
    ]
    assert [c.name for c in get_category_stats(records)] == ["Ev", "Giyim", "Aksesuar"]

    returns = get_return_stats(records)
    assert [r.name for r in returns.by_quantity] == ["Tabak", "Bardak"]
    assert [r.name for r in returns.by_amount] == ["Tabak", "Bardak"]


def test_top_products_non_increasing_and_limited(make_record):
    records = [
        make_record(product_description=name, quantity=qty)
        for name, qty in [("a", 3), ("b", 1), ("c", 7), ("d", 3), ("e", 2), ("f", 5), ("a", 1)]
    ]
    records.append(make_record(product_description="z", quantity=50, returned=True))
    top = get_top_products(records)

    assert len(top) == 5
    assert [(p.name, p.qty) for p in top] == [("c", 7), ("f", 5), ("a", 4), ("d", 3), ("e", 2)]
    assert all(x.qty >= y.qty for x, y in zip(top, top[1:]))


def test_search_is_case_insensitive_on_code_and_description(make_record):
    records = [
        make_record(product_code="KZK-001", product_description="Keten Gömlek"),
        make_record(product_code="AKS-010", product_description="İpek Eşarp"),
        make_record(product_code="EV-101", product_description="IŞIKLI Ayna"),
    ]
    assert len(search_records(records, "kzk")) == 1
    assert len(search_records(records, "gömLEK")) == 1
    assert [r.product_code for r in search_records(records, "ipek")] == ["AKS-010"]
    assert [r.product_code for r in search_records(records, "ışıklı")] == ["EV-101"]
    assert search_records(records, "   ") == records
    assert search_records(records, "yok") == []


def test_turkish_lower():
    assert turkish_lower("İSTANBUL") == "istanbul"
    assert turkish_lower("IĞDIR") == "ığdır"
    assert turkish_lower("2025 OCAK") == "2025 ocak"


def test_product_search_metrics(sample_records):
    m = get_product_search_metrics(search_records(sample_records, "gömlek"))
    assert m.total_qty == 2
    assert m.total_revenue == 1200
    assert m.total_return_qty == 1


def test_product_search_metrics_empty():
    m = get_product_search_metrics([])
    assert (m.total_qty, m.total_revenue, m.total_return_qty) == (0, 0, 0)


def test_income_statement(sample_records, expenses):
    m = calculate_metrics(sample_records, expenses, ALL, ALL)
    lines = {item.name: item.value for item in get_income_statement(m)}

    assert list(lines) == [
        "Toplam Ciro (KDV Dahil)", "Toplam Ciro (KDV Hariç)", "(-) Alış Maliyeti (COGS)",
        "BRÜT KAR", "(-) Operasyonel Giderler", "(-) Reklam Gideri", "(-) İşletme Gideri",
        "NET KAR",
    ]
    assert lines["Toplam Ciro (KDV Hariç)"] == pytest.approx(2250)
    assert lines["(-) Alış Maliyeti (COGS)"] == 950
    assert lines["BRÜT KAR"] == pytest.approx(1300)
    assert lines["(-) Operasyonel Giderler"] == 508
    assert lines["NET KAR"] == pytest.approx(
        lines["BRÜT KAR"] - lines["(-) Operasyonel Giderler"]
        - lines["(-) Reklam Gideri"] - lines["(-) İşletme Gideri"]
    )


def test_income_statement_keeps_zero_lines():
    lines = get_income_statement(FinancialSummary())
    assert len(lines) == 8
    assert all(item.value == 0 for item in lines)


def test_revenue_share():
    assert revenue_share(900, 2700) == pytest.approx(33.333, abs=1e-3)
    assert revenue_share(100, 0) == 0

"""
E-Ticaret Finans Paneli
Çalıştır: streamlit run ecommerce_finance/dashboard.py
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

# Proje importları - hem lokal hem Streamlit Cloud'da çalışır
PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT.parent) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT.parent))

from ecommerce_finance.auth import check_credentials
from ecommerce_finance.config.logging_config import configure_logging
from ecommerce_finance.config.settings import ALL
from ecommerce_finance.engine.analyzer import (
    calculate_metrics,
    filter_records,
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
)
from ecommerce_finance.engine.comparison import compare_months
from ecommerce_finance.engine.periods import (
    default_comparison_pair,
    unique_periods,
    unique_platforms,
)
from ecommerce_finance.parsers.errors import ImportDataError
from ecommerce_finance.parsers.snapshot import snapshot_filename
from ecommerce_finance.storage.dataset_store import DatasetStore
from ecommerce_finance.utils.numbers import format_currency, format_number

logger = logging.getLogger(__name__)

COLORS = ["#6366f1", "#8b5cf6", "#ec4899", "#f43f5e", "#f59e0b", "#10b981", "#3b82f6"]
CHART_MARGIN = dict(l=20, r=20, t=20, b=20)

# ── Sayfa Ayarları ────────────────────────────────────────
st.set_page_config(
    page_title="E-Ticaret Pro",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ── Veri (tek sahip, oturumlar arası paylaşılır) ─────────
@st.cache_resource
def get_store() -> DatasetStore:
    configure_logging()
    return DatasetStore().load()


@st.cache_data
def cached_periods(version: int, _store: DatasetStore) -> list[str]:
    return unique_periods(_store.records)


@st.cache_data
def cached_platforms(version: int, _store: DatasetStore) -> list[str]:
    return unique_platforms(_store.records)


@st.cache_data
def cached_metrics(version: int, period: str, platform: str, _store: DatasetStore):
    records = filter_records(_store.records, period, platform)
    return calculate_metrics(records, _store.expenses, period, platform)


def period_label(p: str) -> str:
    return "Tüm Zamanlar" if p == ALL else p


def channel_label(p: str) -> str:
    return "Tüm Kanallar" if p == ALL else p


# ══════════════════════════════════════════════════════════
#  GİRİŞ
# ══════════════════════════════════════════════════════════
def render_login():
    st.title("Giriş Yap")
    st.caption("E-Ticaret Finans Analizörü")

    with st.form("login"):
        username = st.text_input("Kullanıcı Adı", placeholder="Kullanıcı adınızı girin")
        password = st.text_input("Şifre", type="password")
        submitted = st.form_submit_button("Giriş")

    if submitted:
        if check_credentials(username, password):
            st.session_state["authenticated"] = True
            st.rerun()
        else:
            st.error("Kullanıcı adı veya şifre hatalı!")


# ══════════════════════════════════════════════════════════
#  VERİ YÖNETİMİ (sidebar)
# ══════════════════════════════════════════════════════════
def render_data_controls(store: DatasetStore):
    st.subheader("Veri")

    upload = st.file_uploader("Excel Yükle", type=["xlsx"], key="xlsx_upload")
    if upload is not None and st.session_state.get("last_upload") != upload.file_id:
        st.session_state["last_upload"] = upload.file_id
        try:
            store.import_workbook(upload)
            st.success(f"{len(store.records)} satır yüklendi.")
        except ImportDataError as e:
            st.error(str(e))

    backup = st.file_uploader("Yedek Yükle", type=["json"], key="json_upload")
    if backup is not None and st.session_state.get("last_backup") != backup.file_id:
        st.session_state["last_backup"] = backup.file_id
        try:
            store.restore(backup.getvalue())
            st.success("Yedek başarıyla yüklendi!")
        except ImportDataError as e:
            st.error(str(e))

    st.download_button(
        "Yedek Al",
        data=store.export(),
        file_name=snapshot_filename(),
        mime="application/json",
    )

    confirm = st.checkbox("Tüm yüklü veriler ve geçmiş silinecek. Emin misiniz?")
    if st.button("Verileri Sıfırla", disabled=not confirm):
        store.clear()
        st.rerun()


def main():
    if not st.session_state.get("authenticated"):
        render_login()
        return

    store = get_store()

    # ── Sidebar ───────────────────────────────────────────
    with st.sidebar:
        st.title("📊 E-Ticaret Pro")
        st.divider()

        page = st.radio(
            "Sayfa",
            ["Genel Bakış", "Kanal Analizi", "Karşılaştırma", "Ürün Analizi"],
            index=0,
        )

        st.divider()
        # Dönem seçimi veri yüklemesinden sonra hesaplanır, yerleşimde üstte kalır
        filter_box = st.container()

        st.divider()
        render_data_controls(store)

        periods = cached_periods(store.version, store)
        with filter_box:
            period = st.selectbox("Dönem", [ALL] + periods, format_func=period_label)

        st.divider()
        st.caption(f"Toplam {len(store.records)} kayıt | {len(periods)} ay")
        if st.button("Çıkış"):
            st.session_state["authenticated"] = False
            st.rerun()

    if not store.records:
        st.info("Henüz veri yok. Soldan Excel dosyanızı yükleyin.")
        return

    if page == "Genel Bakış":
        render_overview(store, period)
    elif page == "Kanal Analizi":
        render_channels(store, period)
    elif page == "Karşılaştırma":
        render_comparison(store, periods)
    elif page == "Ürün Analizi":
        render_products(store, period)


def _pie(items, height=350):
    fig = px.pie(
        names=[i.name for i in items],
        values=[i.value for i in items],
        hole=0.4,
        color_discrete_sequence=COLORS,
    )
    fig.update_layout(height=height, margin=CHART_MARGIN)
    return fig


# ══════════════════════════════════════════════════════════
#  GENEL BAKIŞ
# ══════════════════════════════════════════════════════════
def render_overview(store, period):
    st.title("Genel Bakış")
    st.caption(f"Dönem: {period_label(period)}")

    metrics = cached_metrics(store.version, period, ALL, store)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Ciro (KDV Dahil)", format_currency(metrics.revenue_inc_vat))
    col2.metric("Brüt Kar", format_currency(metrics.gross_profit))
    col3.metric("Net Kar", format_currency(metrics.net_profit))
    col4.metric("Toplam Giderler", format_currency(metrics.total_expenses))

    col5, col6, col7, col8 = st.columns(4)
    col5.metric("Teslim Edilen Sipariş", format_number(metrics.delivered_order_count))
    col6.metric("İade Edilen Sipariş", format_number(metrics.returned_order_count))
    col7.metric("Teslim Edilen Ürün", format_number(metrics.delivered_product_qty))
    col8.metric("İade Edilen Ürün", format_number(metrics.returned_product_qty))

    st.divider()
    col_income, col_left, col_right = st.columns(3)

    with col_income:
        st.subheader("Gelir Tablosu")
        st.dataframe(
            [{"Kalem": i.name, "Tutar": format_currency(i.value)} for i in get_income_statement(metrics)],
            use_container_width=True,
            hide_index=True,
        )

    with col_left:
        st.subheader("Gider Dağılımı")
        breakdown = get_expense_breakdown(metrics)
        if breakdown:
            st.plotly_chart(_pie(breakdown), use_container_width=True)
            st.dataframe(
                [{"Kalem": i.name, "Tutar": format_currency(i.value)} for i in breakdown],
                use_container_width=True,
                hide_index=True,
            )
        else:
            st.caption("Gider kaydı yok.")
        st.caption(f"Maliyet (Alış): {format_currency(metrics.cost_of_goods)}")

    with col_right:
        st.subheader("Kanal Bazlı Ciro")
        channels = get_channel_revenue(filter_records(store.records, period=period))
        if channels:
            fig = px.bar(
                x=[c.value for c in channels],
                y=[c.name for c in channels],
                orientation="h",
                labels={"x": "Ciro (₺)", "y": "Kanal"},
                color=[c.name for c in channels],
                color_discrete_sequence=COLORS,
            )
            fig.update_layout(height=350, margin=CHART_MARGIN, showlegend=False)
            fig.update_yaxes(autorange="reversed")
            st.plotly_chart(fig, use_container_width=True)


# ══════════════════════════════════════════════════════════
#  KANAL ANALİZİ
# ══════════════════════════════════════════════════════════
def render_channels(store, period):
    st.title("Kanal Analizi & Kârlılık")

    platforms = cached_platforms(store.version, store)
    channel = st.selectbox("Kanal", [ALL] + platforms, format_func=channel_label)
    st.caption(f"Dönem: {period_label(period)} | Kanal: {channel_label(channel)}")

    records = filter_records(store.records, period, channel)
    metrics = cached_metrics(store.version, period, channel, store)

    col1, col2, col3 = st.columns(3)
    col1.metric("Toplam Ciro (Gelir)", format_currency(metrics.revenue_inc_vat))
    col2.metric("Toplam Gider", format_currency(metrics.channel_expenses))
    col3.metric("Net Kâr", format_currency(metrics.net_profit))

    col4, col5, col6 = st.columns(3)
    col4.metric("Sipariş Sayısı", format_number(metrics.total_order_count))
    col4.caption(
        f"Teslim: {format_number(metrics.delivered_order_count)} | "
        f"İade: {format_number(metrics.returned_order_count)}"
    )
    col5.metric(
        "Satılan Ürün",
        f"{format_number(metrics.delivered_product_qty + metrics.returned_product_qty)} Adet",
    )
    col5.caption(
        f"Teslim: {format_number(metrics.delivered_product_qty)} | "
        f"İade: {format_number(metrics.returned_product_qty)}"
    )
    col6.metric("İade Oranı", f"%{metrics.return_rate:.1f}")

    st.divider()
    col_left, col_right = st.columns(2)

    with col_left:
        st.subheader("Gider Dağılımı")
        breakdown = get_channel_expense_breakdown(metrics)
        if breakdown:
            st.plotly_chart(_pie(breakdown, height=320), use_container_width=True)

    with col_right:
        st.subheader("En Çok Satan 5 Ürün")
        top = get_top_products(records)
        if top:
            fig = px.bar(
                x=[p.qty for p in top],
                y=[p.name[:35] for p in top],
                orientation="h",
                labels={"x": "Adet", "y": "Ürün"},
                color_discrete_sequence=[COLORS[5]],
            )
            fig.update_layout(height=320, margin=CHART_MARGIN)
            fig.update_yaxes(autorange="reversed")
            st.plotly_chart(fig, use_container_width=True)

    # ── Kategoriler ───────────────────────────────────────
    st.divider()
    st.subheader("Kategori Bazlı Performans")
    categories = get_category_stats(records)
    st.dataframe(
        [
            {
                "Ürün Grubu (Kategori)": cat.name,
                "Satılan Adet": format_number(cat.qty),
                "Toplam Ciro": format_currency(cat.revenue),
                "Ciro Payı": f"%{revenue_share(cat.revenue, metrics.revenue_inc_vat):.1f}",
            }
            for cat in categories
        ],
        use_container_width=True,
        hide_index=True,
    )
    for cat in categories:
        with st.expander(f"{cat.name} - En Çok Satanlar"):
            st.dataframe(
                [{"Ürün": p.name, "Adet": p.qty} for p in cat.top_products],
                use_container_width=True,
                hide_index=True,
            )

    # ── İadeler ───────────────────────────────────────────
    st.divider()
    st.subheader("İade Analizi")
    returns = get_return_stats(records)
    if not returns.by_quantity:
        st.success("Bu filtrede iade kaydı yok.")
        return

    col_q, col_a = st.columns(2)
    with col_q:
        st.caption("En Çok İade Edilen (Adet)")
        st.dataframe(
            [{"Ürün": r.name, "Adet": r.qty} for r in returns.by_quantity],
            use_container_width=True,
            hide_index=True,
        )
    with col_a:
        st.caption("En Çok Ciro Kaybettiren")
        st.dataframe(
            [{"Ürün": r.name, "Kayıp": format_currency(r.lost_amount)} for r in returns.by_amount],
            use_container_width=True,
            hide_index=True,
        )


# ══════════════════════════════════════════════════════════
#  AYLIK KARŞILAŞTIRMA
# ══════════════════════════════════════════════════════════
def render_comparison(store, periods):
    st.title("Aylık Karşılaştırma")

    pair = default_comparison_pair(periods)
    if pair is None:
        st.info("Karşılaştırma için ay bilgisi içeren veri gerekli.")
        return

    col_a, col_b = st.columns(2)
    period_a = col_a.selectbox("1. Ay", periods, index=periods.index(pair[0]))
    period_b = col_b.selectbox("2. Ay", periods, index=periods.index(pair[1]))

    result = compare_months(store.records, store.expenses, period_a, period_b)
    if result is None:
        return

    col1, col2, col3 = st.columns(3)
    col1.metric(
        "Ciro",
        format_currency(result.metrics_b.revenue_inc_vat),
        delta=format_currency(result.diff_revenue),
    )
    col2.metric(
        "Net Kâr",
        format_currency(result.metrics_b.net_profit),
        delta=format_currency(result.diff_profit),
    )
    col3.metric(
        "Toplam Sipariş",
        format_number(result.metrics_b.total_order_count),
        delta=result.diff_orders,
    )

    names = [row.name for row in result.rows]
    fig = go.Figure()
    for label, color in ((period_a, COLORS[0]), (period_b, COLORS[2])):
        fig.add_trace(go.Bar(
            name=label,
            x=names,
            y=[row.values[label] for row in result.rows],
            marker_color=color,
        ))
    fig.update_layout(barmode="group", height=400, margin=CHART_MARGIN)
    st.plotly_chart(fig, use_container_width=True)


# ══════════════════════════════════════════════════════════
#  ÜRÜN ANALİZİ
# ══════════════════════════════════════════════════════════
def render_products(store, period):
    st.title("Ürün Analizi")

    term = st.text_input("Ürün Ara", placeholder="SKU veya Ürün Adı...")
    found = search_records(filter_records(store.records, period=period), term)
    m = get_product_search_metrics(found)

    col1, col2, col3 = st.columns(3)
    col1.metric("Bulunan Toplam Satış", f"{format_number(m.total_qty)} Adet")
    col2.metric("Bulunan Toplam Ciro", format_currency(m.total_revenue))
    col3.metric("İade Edilen", f"{format_number(m.total_return_qty)} Adet")

    st.divider()
    st.subheader(f"{'Arama Sonuçları' if term.strip() else 'Son Satışlar'} ({len(found)} Kayıt)")

    table = [
        {
            "Tarih": r.period,
            "Ürün Adı": r.product_description,
            "Stok Kodu": r.product_code,
            "Kanal": r.platform,
            "Adet": r.quantity,
            "Tutar": format_currency(r.order_amount),
            "Durum": "İade" if r.is_return else "Satış",
        }
        for r in found[:50]
    ]
    st.dataframe(table, use_container_width=True, hide_index=True)


if __name__ == "__main__":
    main()

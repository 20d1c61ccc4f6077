from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from ecommerce_finance.storage.dataset_store import DatasetStore

DASHBOARD = str(Path(__file__).resolve().parent.parent / "ecommerce_finance" / "dashboard.py")


@pytest.fixture
def app(tmp_path, monkeypatch, sample_records, expenses):
    data_dir = tmp_path / "data"
    monkeypatch.setattr("ecommerce_finance.storage.dataset_store.DATA_DIR", data_dir)
    monkeypatch.setattr(
        "ecommerce_finance.storage.dataset_store.SEED_FILE", tmp_path / "seed_yok.json"
    )
    DatasetStore(data_dir).replace(sample_records, expenses)
    st.cache_resource.clear()
    st.cache_data.clear()

    at = AppTest.from_file(DASHBOARD, default_timeout=30)
    at.session_state["authenticated"] = True
    return at


def _table(at, column):
    for df in at.dataframe:
        if column in df.value.columns:
            return df.value
    raise AssertionError(f"{column} sütunlu tablo yok")


def test_login_required():
    st.cache_resource.clear()
    at = AppTest.from_file(DASHBOARD, default_timeout=30).run()
    assert not at.exception
    assert at.title[0].value == "Giriş Yap"


def test_period_options_come_from_loaded_data(app):
    app.run()
    assert not app.exception

    options = app.sidebar.selectbox[0].options
    assert "2025 Ocak" in options
    assert "2025 Şubat" in options
    assert any("2 ay" in c.value for c in app.sidebar.caption)


def test_overview_shows_income_statement(app):
    app.run()
    assert not app.exception

    assert "Gelir Tablosu" in [s.value for s in app.subheader]
    table = _table(app, "Kalem")
    assert table["Kalem"].tolist()[:4] == [
        "Toplam Ciro (KDV Dahil)", "Toplam Ciro (KDV Hariç)", "(-) Alış Maliyeti (COGS)",
        "BRÜT KAR",
    ]
    assert table["Kalem"].tolist()[-1] == "NET KAR"
    assert any(c.value.startswith("Maliyet (Alış)") for c in app.caption)


def test_channel_page_cards_and_category_share(app):
    app.run()
    app.sidebar.radio[0].set_value("Kanal Analizi").run()
    assert not app.exception

    metrics = {m.label: m.value for m in app.metric}
    assert metrics["Sipariş Sayısı"] == "4"
    assert metrics["Satılan Ürün"] == "7 Adet"
    captions = [c.value for c in app.caption]
    assert "Teslim: 3 | İade: 1" in captions
    assert "Teslim: 6 | İade: 1" in captions

    shares = _table(app, "Ciro Payı")
    assert dict(zip(shares["Ürün Grubu (Kategori)"], shares["Ciro Payı"])) == {
        "Giyim": "%66.7",
        "Aksesuar": "%33.3",
    }

import json

import pytest

from ecommerce_finance.__main__ import main


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(
        "ecommerce_finance.storage.dataset_store.SEED_FILE", tmp_path / "seed_yok.json"
    )
    return tmp_path / "data"


def _run(data_dir, *args):
    return main(["--data-dir", str(data_dir), *args])


def test_sample_import_analyze(tmp_path, data_dir, capsys):
    sample = tmp_path / "ornek.xlsx"
    assert _run(data_dir, "sample", "--output", str(sample), "--seed", "3") == 0
    assert _run(data_dir, "import", str(sample)) == 0
    assert "360 satir" in capsys.readouterr().out

    assert _run(data_dir, "analyze", "--period", "2025 Ocak") == 0
    out = capsys.readouterr().out
    assert "KAR/ZARAR OZETI" in out
    assert "2025 Ocak" in out
    assert "Kanal Cirosu" in out

    assert _run(data_dir, "analyze", "--platform", "Trendyol") == 0
    assert "Kanal Cirosu" not in capsys.readouterr().out


def test_compare_defaults_to_last_two_months(tmp_path, data_dir, capsys):
    sample = tmp_path / "ornek.xlsx"
    _run(data_dir, "sample", "--output", str(sample), "--seed", "3")
    _run(data_dir, "import", str(sample))
    capsys.readouterr()

    assert _run(data_dir, "compare") == 0
    out = capsys.readouterr().out
    assert "2025 Mayıs" in out
    assert "2025 Haziran" in out


def test_compare_with_one_month_uses_latest_as_second(tmp_path, data_dir, capsys):
    sample = tmp_path / "ornek.xlsx"
    _run(data_dir, "sample", "--output", str(sample), "--seed", "3")
    _run(data_dir, "import", str(sample))
    capsys.readouterr()

    assert _run(data_dir, "compare", "2025 Ocak") == 0
    out = capsys.readouterr().out
    assert "2025 Ocak  →  2025 Haziran" in out
    assert "2025 Mayıs" not in out


def test_export_restore_reset(tmp_path, data_dir, capsys):
    backup = tmp_path / "yedek.json"
    backup.write_text(json.dumps({
        "sales": [{"Platform": "N11", "Ay": "2025 Mart", "SiparisTutari": 120, "AlisFiyati": 50}],
        "expenses": {"2025 Mart": {"marketing": 10, "operations": 0}},
    }), encoding="utf-8")

    assert _run(data_dir, "restore", str(backup)) == 0
    exported = tmp_path / "cikti.json"
    assert _run(data_dir, "export", "--output", str(exported)) == 0
    data = json.loads(exported.read_text(encoding="utf-8"))
    assert data["sales"][0]["Platform"] == "N11"
    assert data["expenses"] == {"2025 Mart": {"marketing": 10.0, "operations": 0.0}}

    assert _run(data_dir, "reset") == 0
    capsys.readouterr()
    assert _run(data_dir, "analyze") == 0
    assert "Veri bulunamadi" in capsys.readouterr().out


def test_products_search(tmp_path, data_dir, capsys):
    backup = tmp_path / "yedek.json"
    backup.write_text(json.dumps({"sales": [
        {"Platform": "N11", "Ay": "2025 Mart", "UrunKodu": "KZK-1", "UrunAciklamasi": "Gömlek",
         "UrunAdedi": 2, "SiparisTutari": 100},
        {"Platform": "N11", "Ay": "2025 Mart", "UrunKodu": "KZK-1", "UrunAciklamasi": "Gömlek",
         "UrunAdedi": 1, "SiparisTutari": 50, "SiparisStatusu": "İade Edildi"},
    ]}), encoding="utf-8")
    _run(data_dir, "restore", str(backup))
    capsys.readouterr()

    assert _run(data_dir, "products", "--search", "kzk") == 0
    out = capsys.readouterr().out
    assert "(2 kayit)" in out
    assert "Satis:  2 adet" in out
    assert "Iade:   1 adet" in out


def test_bad_backup_exits_with_error(tmp_path, data_dir, capsys):
    bad = tmp_path / "bozuk.json"
    bad.write_text("{", encoding="utf-8")
    assert _run(data_dir, "restore", str(bad)) == 1
    assert "Hata" in capsys.readouterr().out


def test_report_command(tmp_path, data_dir):
    out = tmp_path / "rapor.xlsx"
    assert _run(data_dir, "report", "--output", str(out)) == 0
    assert out.exists()


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out

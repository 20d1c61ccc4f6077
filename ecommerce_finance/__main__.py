"""
ecommerce_finance CLI - E-ticaret finans analizörü.

Kullanım:
    python -m ecommerce_finance sample              → Örnek Excel oluştur
    python -m ecommerce_finance import dosya.xlsx   → Excel verisini yükle
    python -m ecommerce_finance analyze             → Kâr/zarar özeti
    python -m ecommerce_finance compare A B         → İki ayı karşılaştır
    python -m ecommerce_finance products            → Ürün/kategori analizi
    python -m ecommerce_finance report              → Excel rapor oluştur
    python -m ecommerce_finance export / restore    → JSON yedek
    python -m ecommerce_finance reset               → Veriyi sıfırla
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Proje kök dizinini Python path'e ekle
PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT.parent) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT.parent))

from ecommerce_finance.config.logging_config import configure_logging
from ecommerce_finance.config.settings import ALL, REPORTS_DIR
from ecommerce_finance.parsers.errors import ImportDataError
from ecommerce_finance.storage.dataset_store import DatasetStore
from ecommerce_finance.utils.numbers import format_currency, format_number

logger = logging.getLogger(__name__)


def _open_store(args) -> DatasetStore:
    return DatasetStore(args.data_dir).load()


def cmd_sample(args):
    """Örnek Excel verisi oluşturur."""
    from ecommerce_finance.scripts.generate_sample import generate_sample_workbook

    path = generate_sample_workbook(args.output, seed=args.seed)
    print(f"  Ornek Excel dosyasi: {path}")
    print(f"  Yuklemek icin: python -m ecommerce_finance import {path}")


def cmd_import(args):
    """Excel dosyasını okuyup mevcut verinin yerine koyar."""
    store = DatasetStore(args.data_dir)
    store.import_workbook(args.file)
    print(f"  {len(store.records)} satir ve {len(store.expenses)} aylik gider yuklendi.")


def cmd_analyze(args):
    """Kâr/zarar özetini gösterir."""
    from ecommerce_finance.engine.analyzer import (
        calculate_metrics,
        filter_records,
        get_channel_revenue,
        get_expense_breakdown,
    )

    store = _open_store(args)
    if not store.records:
        print("\n  Veri bulunamadi!")
        print("  Once 'python -m ecommerce_finance sample' ve 'import' ile veri yukleyin.")
        return

    records = filter_records(store.records, args.period, args.platform)
    metrics = calculate_metrics(records, store.expenses, args.period, args.platform)

    period_name = "Tum Zamanlar" if args.period == ALL else args.period
    platform_name = "Tum Kanallar" if args.platform == ALL else args.platform

    print(f"\n{'='*60}")
    print(f"  KAR/ZARAR OZETI  |  {period_name}  |  {platform_name}")
    print(f"{'='*60}\n")
    _print_summary(metrics)

    if args.platform == ALL:
        print(f"\n  Gider Dagilimi:")
        for item in get_expense_breakdown(metrics):
            print(f"    {item.name:20s} {format_currency(item.value):>18s}")

        print(f"\n  Kanal Cirosu:")
        for ch in get_channel_revenue(records):
            print(f"    {ch.name:20s} {format_currency(ch.value):>18s}")
    print()


def _print_summary(m):
    """Finansal özeti ekrana yazdırır."""
    print(f"  Ciro (KDV Dahil):  {format_currency(m.revenue_inc_vat):>18s}")
    print(f"  Ciro (KDV Haric):  {format_currency(m.revenue_ex_vat):>18s}")
    print(f"  Urun Maliyeti:     {format_currency(m.cost_of_goods):>18s}")
    print(f"  Brut Kar:          {format_currency(m.gross_profit):>18s}")
    print(f"  Net Kar:           {format_currency(m.net_profit):>18s}")
    print(f"  Toplam Giderler:   {format_currency(m.total_expenses):>18s}")
    print(f"  Iade Ciro Kaybi:   {format_currency(m.return_loss):>18s}")
    print(f"  Siparis:           {format_number(m.delivered_order_count)} teslim / "
          f"{format_number(m.returned_order_count)} iade")
    print(f"  Urun Adedi:        {format_number(m.delivered_product_qty)} teslim / "
          f"{format_number(m.returned_product_qty)} iade")


def cmd_compare(args):
    """İki ayı karşılaştırır. Ay verilmezse son iki ay, tek ay verilirse o ay ve son ay kullanılır."""
    from ecommerce_finance.engine.comparison import compare_months
    from ecommerce_finance.engine.periods import default_comparison_pair, unique_periods

    store = _open_store(args)
    periods = unique_periods(store.records)

    pair = default_comparison_pair(periods)
    if args.period_a:
        # Tek ay verilirse en son ay ile karşılaştırılır
        latest = pair[1] if pair else args.period_a
        pair = (args.period_a, args.period_b or latest)

    result = compare_months(store.records, store.expenses, *pair) if pair else None
    if result is None:
        print("  Karsilastirma icin en az bir ay gerekli.")
        return

    print(f"\n  {result.period_a}  →  {result.period_b}\n")
    for row in result.rows:
        a = row.values[result.period_a]
        b = row.values[result.period_b]
        print(f"  {row.name:16s} {format_currency(a):>16s} {format_currency(b):>16s}")

    print()
    print(f"  Ciro Farki:      {format_currency(result.diff_revenue)}")
    print(f"  Net Kar Farki:   {format_currency(result.diff_profit)}")
    print(f"  Siparis Farki:   {result.diff_orders:+d}")


def cmd_products(args):
    """Kategori, iade ve ürün arama analizini gösterir."""
    from ecommerce_finance.engine.analyzer import (
        filter_records,
        get_category_stats,
        get_product_search_metrics,
        get_return_stats,
        get_top_products,
        search_records,
    )

    store = _open_store(args)
    records = filter_records(store.records, args.period, args.platform)

    if args.search:
        found = search_records(records, args.search)
        m = get_product_search_metrics(found)
        print(f"\n  Arama: '{args.search}'  ({len(found)} kayit)")
        print(f"    Satis:  {format_number(m.total_qty)} adet")
        print(f"    Ciro:   {format_currency(m.total_revenue)}")
        print(f"    Iade:   {format_number(m.total_return_qty)} adet")
        return

    print(f"\n  En Cok Satanlar:")
    for i, p in enumerate(get_top_products(records), 1):
        print(f"    {i}. {p.name[:40]:40s} {p.qty:5d} adet")

    print(f"\n  Kategoriler:")
    for cat in get_category_stats(records):
        print(f"    {cat.name[:25]:25s} {format_currency(cat.revenue):>16s} {cat.qty:6d} adet")

    returns = get_return_stats(records)
    if returns.by_quantity:
        print(f"\n  En Cok Iade Edilenler:")
        for r in returns.by_quantity:
            print(f"    - {r.name[:40]:40s} {r.qty:4d} adet  {format_currency(r.lost_amount)}")
    print()


def cmd_report(args):
    """Excel kâr/zarar raporu oluşturur."""
    from ecommerce_finance.writers.excel_report import generate_report

    store = _open_store(args)
    output = Path(args.output) if args.output else REPORTS_DIR / "kar_zarar_raporu.xlsx"
    path = generate_report(store.records, store.expenses, output, period=args.period)
    print(f"  Rapor olusturuldu: {path}")


def cmd_export(args):
    """Veriyi JSON yedek dosyasına yazar."""
    from ecommerce_finance.parsers.snapshot import snapshot_filename

    store = _open_store(args)
    output = Path(args.output) if args.output else Path(snapshot_filename())
    output.write_text(store.export(), encoding="utf-8")
    print(f"  Yedek alindi: {output}")


def cmd_restore(args):
    """JSON yedekten veriyi geri yükler."""
    store = DatasetStore(args.data_dir)
    store.restore(Path(args.file).read_text(encoding="utf-8"))
    print("  Yedek basariyla yuklendi!")


def cmd_reset(args):
    """Yüklü veriyi siler."""
    store = DatasetStore(args.data_dir)
    store.clear()
    print("  Tum yuklu veriler silindi.")


def _add_filters(parser):
    parser.add_argument("--period", default=ALL, help="Ay etiketi (varsayilan: tum zamanlar)")
    parser.add_argument("--platform", default=ALL, help="Kanal adi (varsayilan: tum kanallar)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecommerce_finance",
        description="E-Ticaret Finans Analizoru",
    )
    parser.add_argument("--data-dir", type=Path, default=None, help="Veri klasoru")
    parser.add_argument("-v", "--verbose", action="store_true", help="Ayrintili log")
    sub = parser.add_subparsers(dest="command", help="Komutlar")

    p = sub.add_parser("sample", help="Ornek Excel olustur")
    p.add_argument("--output", type=Path, default=None)
    p.add_argument("--seed", type=int, default=None)
    p.set_defaults(func=cmd_sample)

    p = sub.add_parser("import", help="Excel dosyasi yukle")
    p.add_argument("file", type=Path)
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("analyze", help="Kar/zarar ozeti")
    _add_filters(p)
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser("compare", help="Iki ayi karsilastir")
    p.add_argument("period_a", nargs="?", default="")
    p.add_argument("period_b", nargs="?", default="")
    p.set_defaults(func=cmd_compare)

    p = sub.add_parser("products", help="Urun analizi")
    _add_filters(p)
    p.add_argument("--search", default="", help="Stok kodu veya urun adi")
    p.set_defaults(func=cmd_products)

    p = sub.add_parser("report", help="Excel rapor olustur")
    p.add_argument("--output", default=None)
    p.add_argument("--period", default=ALL)
    p.set_defaults(func=cmd_report)

    p = sub.add_parser("export", help="JSON yedek al")
    p.add_argument("--output", default=None)
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("restore", help="JSON yedekten yukle")
    p.add_argument("file", type=Path)
    p.set_defaults(func=cmd_restore)

    p = sub.add_parser("reset", help="Veriyi sifirla")
    p.set_defaults(func=cmd_reset)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    if not getattr(args, "func", None):
        parser.print_help()
        return 0

    try:
        args.func(args)
    except ImportDataError as e:
        print(f"  Hata: {e}")
        return 1
    except OSError as e:
        logger.error("Dosya islemi basarisiz: %s", e)
        print(f"  Hata: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Test için örnek e-ticaret Excel dosyası oluşturur (satışlar + sabit giderler).
"""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

from openpyxl import Workbook

from ecommerce_finance.config.settings import RETURN_STATUS, SAMPLE_FILE

logger = logging.getLogger(__name__)

# ── Örnek ürünler ─────────────────────────────────────────

PRODUCTS = [
    ("KZK-001", "Kadın Keten Gömlek - Beyaz", "Giyim", 449.90, 160.0),
    ("KZK-002", "Oversize Basic Tişört - Siyah", "Giyim", 249.90, 75.0),
    ("KZK-003", "Yüksek Bel Mom Jean", "Giyim", 599.90, 230.0),
    ("AKS-010", "Deri Kartlık - Taba", "Aksesuar", 189.90, 55.0),
    ("AKS-011", "İpek Eşarp - Desenli", "Aksesuar", 329.90, 110.0),
    ("AKS-012", "Çelik Kolye - İnce Zincir", "Aksesuar", 159.90, 40.0),
    ("EV-101", "Pamuk Nevresim Takımı Çift Kişilik", "Ev Tekstili", 899.90, 380.0),
    ("EV-102", "Kadife Kırlent Kılıfı 2'li", "Ev Tekstili", 219.90, 70.0),
    ("EV-103", "Bambu Banyo Havlusu", "Ev Tekstili", 279.90, 95.0),
    ("AYK-201", "Günlük Sneaker - Beyaz", "Ayakkabı", 799.90, 340.0),
]

PLATFORMS = {
    # platform: (komisyon oranı, platform hizmet bedeli)
    "Trendyol": (0.21, 8.49),
    "Hepsiburada": (0.18, 6.99),
    "N11": (0.15, 5.99),
    "Web Sitesi": (0.03, 0.0),
}

MONTHS = ["2025 Ocak", "2025 Şubat", "2025 Mart", "2025 Nisan", "2025 Mayıs", "2025 Haziran"]

SALES_HEADERS = [
    "Platform", "Sipariş Tarihi", "Ay", "Sipariş No", "Sipariş Statüsü",
    "Ürün Kodu", "Ürün Grubu", "Ürün Açıklaması", "Ürün Adedi", "Alış Fiyatı",
    "Sipariş Tutarı", "Komisyon", "Kargo", "İade Kargo Bedeli", "Ceza Bedeli",
    "Platform Gideri", "Sipariş Sayısı",
]


def _sales_row(order_no: int, month_idx: int) -> list:
    code, name, group, price, cost = random.choice(PRODUCTS)
    platform = random.choice(list(PLATFORMS))
    rate, service_fee = PLATFORMS[platform]

    qty = random.choices([1, 2, 3], weights=[75, 18, 7])[0]
    amount = round(price * qty, 2)
    is_return = random.random() < 0.12
    shipping = round(random.choice([34.99, 42.5, 49.9]), 2)
    penalty = round(random.choice([0, 0, 0, 0, 0, 0, 0, 0, 25.0]), 2)

    return [
        platform,
        f"{random.randint(1, 28):02d}.{month_idx + 1:02d}.2025",
        MONTHS[month_idx],
        f"SP{100000 + order_no}",
        RETURN_STATUS if is_return else random.choice(["Teslim Edildi", "Kargoya Verildi"]),
        code,
        group,
        name,
        qty,
        round(cost * qty, 2),
        amount,
        round(amount * rate, 2),
        shipping,
        shipping if is_return else 0,
        penalty,
        service_fee,
        1,
    ]


def generate_sample_workbook(
    output_path: Optional[Path] = None,
    orders_per_month: int = 60,
    seed: Optional[int] = None,
) -> Path:
    """İki sayfalı örnek Excel dosyası yazar ve yolunu döner."""
    if seed is not None:
        random.seed(seed)
    output_path = Path(output_path or SAMPLE_FILE)

    wb = Workbook()
    ws = wb.active
    ws.title = "Satislar"
    ws.append(SALES_HEADERS)

    order_no = 0
    for month_idx in range(len(MONTHS)):
        for _ in range(orders_per_month):
            order_no += 1
            ws.append(_sales_row(order_no, month_idx))

    ws_exp = wb.create_sheet("Giderler")
    ws_exp.append(["Ay", "Harcanan Reklam Bakiyesi", None, None, "Ay", "Aylık İşletme Gideri"])
    for month in MONTHS:
        ws_exp.append([month, round(random.uniform(12000, 45000), 2), None, None, month, 150000])

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)
    logger.info("Ornek veri yazildi: %s (%d satir)", output_path, order_no)
    return output_path


def main():
    path = generate_sample_workbook()
    print(f"  Ornek Excel dosyasi: {path}")


if __name__ == "__main__":
    main()

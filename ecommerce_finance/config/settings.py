"""
Proje ayarları ve sabit değerler.
"""
import os
from pathlib import Path

# ── Dizinler ──────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.environ.get("ECOM_FINANCE_DATA_DIR", PROJECT_ROOT / "data"))
REPORTS_DIR = PROJECT_ROOT / "reports"
SAMPLE_FILE = DATA_DIR / "ornek_eticaret.xlsx"
SEED_FILE = DATA_DIR / "seed.json"

# ── Kalıcı veri (iki ayrı blob) ───────────────────────────
SALES_STORE_FILE = "ecommerce_sales_data.json"
EXPENSES_STORE_FILE = "ecommerce_expenses.json"

# ── Filtreler ─────────────────────────────────────────────
ALL = "all"                        # "Tüm Zamanlar" / "Tüm Kanallar"

# ── Finansal Kurallar ─────────────────────────────────────
VAT_DIVISOR = 1.2                  # %20 KDV, KDV dahil tutardan geri hesap
RETURN_STATUS = "İade Edildi"

# ── Varsayılan Etiketler ──────────────────────────────────
DEFAULT_PLATFORM = "Diğer"
DEFAULT_PRODUCT_GROUP = "Genel"
CATEGORY_FALLBACK = "Diğer"

TOP_N = 5

# ── Sabit Giderler (ilk açılış) ───────────────────────────
DEFAULT_FIXED_EXPENSES = {
    "2025 OCAK": {"marketing": 25000, "operations": 150000},
    "2025 Şubat": {"marketing": 17250, "operations": 150000},
    "2025 Mart": {"marketing": 15500, "operations": 150000},
    "2025 Nisan": {"marketing": 37837, "operations": 150000},
    "2025 Mayıs": {"marketing": 41393, "operations": 150000},
    "2025 Haziran": {"marketing": 22273, "operations": 150000},
    "2025 Temmuz": {"marketing": 39123, "operations": 150000},
    "2025 Ağustos": {"marketing": 69211.03, "operations": 150000},
    "2025 Eylül": {"marketing": 42044.48, "operations": 150000},
    "2025 Ekim": {"marketing": 62301, "operations": 150000},
    "2025 Kasım": {"marketing": 69110.73, "operations": 150000},
    "2025 Aralık": {"marketing": 63352.55, "operations": 150000},
}

# ── Panel Girişi ──────────────────────────────────────────
# ECOM_FINANCE_USERS="kullanici:sifre,kullanici2:sifre2"
_DEFAULT_USERS = "alaa:1234,can:1234,fatih:1234"


def _parse_users(raw: str) -> dict[str, str]:
    users = {}
    for pair in raw.split(","):
        name, sep, password = pair.strip().partition(":")
        if sep and name:
            users[name] = password
    return users


DASHBOARD_USERS = _parse_users(os.environ.get("ECOM_FINANCE_USERS", _DEFAULT_USERS))

# ── Loglama ───────────────────────────────────────────────
LOG_LEVEL = os.environ.get("ECOM_FINANCE_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# ── Rapor Ayarları ────────────────────────────────────────
CURRENCY_SYMBOL = "₺"
REPORT_DATE_FORMAT = "%d.%m.%Y"
BACKUP_FILE_PATTERN = "eticaret-yedek-{date}.json"

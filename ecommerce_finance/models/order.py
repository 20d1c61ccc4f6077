"""
Sipariş satırı veri modeli - Excel'deki her satış/iade satırı bu modele dönüşür.
"""
from __future__ import annotations

from dataclasses import dataclass

from ecommerce_finance.config.settings import DEFAULT_PRODUCT_GROUP, RETURN_STATUS
from ecommerce_finance.utils.numbers import parse_int, parse_number

# Yedek JSON dosyasındaki anahtarlar (A–Q sütun sırası)
FIELD_KEYS = {
    "platform": "Platform",
    "order_date": "SiparisTarihi",
    "period": "Ay",
    "order_no": "SiparisNo",
    "order_status": "SiparisStatusu",
    "product_code": "UrunKodu",
    "product_group": "UrunGrubu",
    "product_description": "UrunAciklamasi",
    "quantity": "UrunAdedi",
    "purchase_cost": "AlisFiyati",
    "order_amount": "SiparisTutari",
    "commission": "Komisyon",
    "shipping_cost": "Kargo",
    "return_shipping_cost": "IadeKargoBedeli",
    "penalty_fee": "CezaBedeli",
    "platform_fee": "PlatformGideri",
    "order_count": "SiparisSayisi",
}

TEXT_FIELDS = (
    "platform", "order_date", "period", "order_no", "order_status",
    "product_code", "product_group", "product_description",
)
INT_FIELDS = ("quantity", "order_count")


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


@dataclass(frozen=True)
class OrderRecord:
    """Tek bir satış veya iade satırı. Oluşturulduktan sonra değişmez."""
    platform: str
    period: str
    order_status: str = ""
    product_group: str = DEFAULT_PRODUCT_GROUP
    product_code: str = ""
    product_description: str = ""

    quantity: int = 0
    purchase_cost: float = 0.0        # KDV hariç toplam alış maliyeti
    order_amount: float = 0.0         # KDV dahil sipariş tutarı

    # Kesintiler (iade olsun olmasın her satırda toplanır)
    commission: float = 0.0
    shipping_cost: float = 0.0
    return_shipping_cost: float = 0.0
    penalty_fee: float = 0.0
    platform_fee: float = 0.0

    order_count: int = 1

    # Bilgi amaçlı sütunlar
    order_date: str = ""
    order_no: str = ""

    @property
    def is_return(self) -> bool:
        return self.order_status == RETURN_STATUS

    @property
    def effective_order_count(self) -> int:
        """Sipariş sayısı boş/0 ise satır tek sipariş sayılır."""
        return self.order_count or 1

    @property
    def total_shipping(self) -> float:
        return self.shipping_cost + self.return_shipping_cost

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in FIELD_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> "OrderRecord":
        """
        Yedek/JSON satırını modele çevirir. Tüm tip dönüşümleri burada yapılır;
        sayısal olmayan değerler 0, eksik metinler boş olur. Varsayılan
        platform/grup adları yalnızca Excel okunurken verilir.
        """
        values = {}
        for attr, key in FIELD_KEYS.items():
            raw = data.get(key)
            if attr in TEXT_FIELDS:
                values[attr] = _text(raw)
            elif attr in INT_FIELDS:
                values[attr] = parse_int(raw)
            else:
                values[attr] = parse_number(raw)
        return cls(**values)

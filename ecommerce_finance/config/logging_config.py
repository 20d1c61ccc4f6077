"""
Loglama kurulumu - CLI ve dashboard girişlerinde bir kez çağrılır.
"""
from __future__ import annotations

import logging
from typing import Optional

from ecommerce_finance.config.settings import LOG_FORMAT, LOG_LEVEL


def configure_logging(level: Optional[str] = None) -> None:
    """Kök logger'ı ayarlar. Tekrar çağrılırsa seviyeyi günceller."""
    resolved = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)

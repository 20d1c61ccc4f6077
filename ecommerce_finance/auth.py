"""
Panel girişi - basit kullanıcı adı/şifre kontrolü.
"""
from __future__ import annotations

import hmac
import logging
from typing import Mapping, Optional

from ecommerce_finance.config.settings import DASHBOARD_USERS

logger = logging.getLogger(__name__)


def check_credentials(
    username: str,
    password: str,
    users: Optional[Mapping[str, str]] = None,
) -> bool:
    """Kullanıcı adı ve şifre tanımlı kullanıcılardan biriyle eşleşiyor mu?"""
    users = DASHBOARD_USERS if users is None else users
    expected = users.get((username or "").strip())
    if expected is None:
        logger.warning("Bilinmeyen kullanici ile giris denemesi")
        return False

    ok = hmac.compare_digest(expected.encode("utf-8"), (password or "").encode("utf-8"))
    if not ok:
        logger.warning("Hatali sifre: %s", username)
    return ok

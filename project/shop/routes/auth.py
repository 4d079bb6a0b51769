# shop/routes/auth.py

import secrets
from typing import Optional
from fastapi import Header, Request

from shop.utils.errors import AccessDeniedError


async def require_access_key(request: Request, x_access_key: Optional[str] = Header(default=None)):
    """
    Проверяет заголовок x-access-key против ACCESS_KEY из настроек.

    **Статусы:**
    - 403 Forbidden – ключ отсутствует, неверный или не настроен на сервере
    """
    expected = request.app.state.settings.ACCESS_KEY
    if not x_access_key or not expected or not secrets.compare_digest(x_access_key.encode(), expected.encode()):
        await request.app.state.log.log_warning("auth", "Отказ в доступе к /orders", {"client": request.client.host if request.client else None})
        raise AccessDeniedError()

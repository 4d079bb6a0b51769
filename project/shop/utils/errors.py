# shop/utils/errors.py

"""
Ошибки магазина.

Каждая ошибка знает свой HTTP-статус и текст для клиента; обработчик в
main.py превращает их в ответ вида {"success": false, "message": ...}.
"""

from typing import Optional


class ShopError(Exception):
    status_code = 500
    message = "Internal server error."

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message if detail is None else f"{self.message} {detail}")


# ────────────── 4xx ──────────────
class MissingFieldError(ShopError):
    status_code = 400
    message = "All fields are required."


class InvalidFieldError(ShopError):
    status_code = 400
    message = "Invalid field value."


class ProductNotFoundError(ShopError):
    status_code = 404
    message = "Perfume not found."


class AccessDeniedError(ShopError):
    status_code = 403
    message = "Access denied."


class OrdersFileNotFoundError(ShopError):
    status_code = 404
    message = "Excel file not found."


# ────────────── 5xx ──────────────
class CatalogReadError(ShopError):
    message = "Error reading perfumes.json"


class StorageWriteError(ShopError):
    message = "Error saving order."


# ────────────── Внутренние (не доходят до клиента) ──────────────
class StoreCorruptError(ShopError):
    message = "Order store is missing or corrupt."


class NotificationError(ShopError):
    message = "Notification failed."

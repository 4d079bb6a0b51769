# shop/services/order.py

from typing import Any, List
from fastapi import Request

from shop.schemas.order import OrderDraft, OrderRequest, PersistedOrder
from shop.services.catalog import as_text, find_perfume, read_catalog
from shop.utils.errors import InvalidFieldError, MissingFieldError, ProductNotFoundError

REQUIRED_FIELDS = ("name", "phone", "perfumeId", "quantity", "deliveryAddress")
QUANTITY_MESSAGE = "Quantity must be a positive whole number."

# 0 / 0.0 / false в этих полях считаются пустыми; количество проверяет parse_quantity
ZERO_IS_MISSING = ("name", "phone", "perfumeId", "deliveryAddress")


def is_missing(field: str, value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if field in ZERO_IS_MISSING and isinstance(value, (bool, int, float)):
        return not value
    return False


def require_fields(order: OrderRequest) -> None:
    """Все обязательные поля присутствуют и не пустые."""
    missing = [field for field in REQUIRED_FIELDS if is_missing(field, getattr(order, field))]
    if missing:
        raise MissingFieldError(detail=", ".join(missing))

    for field in REQUIRED_FIELDS:
        if isinstance(getattr(order, field), (dict, list)):
            raise InvalidFieldError(f"Field '{field}' must be a plain value.")


def parse_quantity(value: Any) -> int:
    """Количество: целое >= 1; "2", 2 и 2.0 допустимы, 0 / "-1" / "abc" нет."""
    if isinstance(value, bool):
        raise InvalidFieldError(QUANTITY_MESSAGE)
    try:
        number = float(str(value).strip())
    except ValueError:
        raise InvalidFieldError(QUANTITY_MESSAGE) from None
    if not number.is_integer() or number < 1:
        raise InvalidFieldError(QUANTITY_MESSAGE)
    return int(number)


def validate_order(order: OrderRequest, catalog: List[Any]) -> OrderDraft:
    """
    Проверка заказа и привязка к каталогу.

    Название товара всегда берётся из каталога, а не из запроса.
    """
    require_fields(order)
    parse_quantity(order.quantity)

    perfume = find_perfume(catalog, order.perfumeId)
    if perfume is None:
        raise ProductNotFoundError(detail=as_text(order.perfumeId))

    return OrderDraft(
        name=as_text(order.name),
        phone=as_text(order.phone),
        perfumeId=as_text(order.perfumeId),
        perfumeName=as_text(perfume.get("name")),
        quantity=as_text(order.quantity),
        deliveryAddress=as_text(order.deliveryAddress),
    )


async def create_order_service(order: OrderRequest, request: Request) -> PersistedOrder:
    """
    Проверка → запись в книгу → уведомление в фоне.
    Уведомление не влияет на результат: заказ уже сохранён.
    """
    state = request.app.state
    log = state.log

    # пустые поля → 400 ещё до чтения каталога
    require_fields(order)
    catalog = await read_catalog(state.settings.CATALOG_PATH)
    draft = validate_order(order, catalog)

    persisted = await state.store.append(draft)
    await log.log_info("order", f"Заказ сохранён: {persisted.name}", {"perfumeId": persisted.perfumeId, "quantity": persisted.quantity})

    state.notifier.notify(persisted)
    return persisted

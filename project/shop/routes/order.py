# shop/routes/order.py

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import FileResponse

from shop.schemas.order import ErrorResponse, OrderRequest, OrderResponse
from shop.services.order import create_order_service
from shop.routes.auth import require_access_key
from shop.utils.errors import OrdersFileNotFoundError, ShopError

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ────────────── CREATE ──────────────
@router.post(
    "/order-perfume",
    response_model=OrderResponse,
    status_code=status.HTTP_200_OK,
    summary="Оформить заказ (одна строка корзины)",
    response_description="Сохранённый заказ в каноническом виде",
    responses={
        200: {"description": "Заказ сохранён"},
        400: {"model": ErrorResponse, "description": "Не заполнены обязательные поля"},
        404: {"model": ErrorResponse, "description": "Аромат не найден в каталоге"},
        500: {"model": ErrorResponse, "description": "Ошибка записи в книгу заказов"},
    },
)
async def create_order(request: Request, order: OrderRequest):
    try:
        persisted = await create_order_service(order, request)
    except ShopError as e:
        await request.app.state.log.log_error("order", f"Заказ не сохранён: {e}", {"status": e.status_code})
        raise
    return OrderResponse(data=persisted)


# ────────────── DOWNLOAD ──────────────
@router.get(
    "/orders",
    summary="Скачать книгу заказов",
    response_description="Файл orders.xlsx",
    responses={
        200: {"description": "Файл отдан", "content": {XLSX_MEDIA_TYPE: {}}},
        403: {"model": ErrorResponse, "description": "Неверный или отсутствующий x-access-key"},
        404: {"model": ErrorResponse, "description": "Файл заказов отсутствует"},
    },
    dependencies=[Depends(require_access_key)],
)
async def download_orders(request: Request):
    store = request.app.state.store
    if not store.exists():
        await request.app.state.log.log_error("order", "Файл заказов не найден", {"path": store.path})
        raise OrdersFileNotFoundError()

    await request.app.state.log.log_info("order", "Книга заказов выгружена")
    return FileResponse(store.path, media_type=XLSX_MEDIA_TYPE, filename="orders.xlsx")

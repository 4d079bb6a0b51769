# shop/schemas/order.py

from pydantic import BaseModel, ConfigDict
from typing import Any, Optional

class OrderRequest(BaseModel):
    """Строка корзины от клиента. Лишние поля принимаются и отбрасываются."""
    model_config = ConfigDict(extra="ignore")

    name: Any = None
    phone: Any = None
    perfumeId: Any = None
    quantity: Any = None
    deliveryAddress: Any = None

class OrderDraft(BaseModel):
    """Проверенный заказ с названием из каталога, ещё без даты."""
    name: str
    phone: str
    perfumeId: str
    perfumeName: str
    quantity: str
    deliveryAddress: str

class PersistedOrder(OrderDraft):
    date: str

class OrderResponse(BaseModel):
    success: bool = True
    message: str = "Order saved successfully!"
    data: PersistedOrder

class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None

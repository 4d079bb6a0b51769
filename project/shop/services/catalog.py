# shop/services/catalog.py

import json
from typing import Any, List, Optional

import aiofiles

from shop.utils.errors import CatalogReadError


def as_text(value: Any) -> str:
    """
    Строковое представление id/количества так, как его видит клиент:
    7 → "7", 7.0 → "7", "07" → "07", True → "true".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


async def read_catalog(path: str) -> List[Any]:
    """
    Читает каталог с диска при каждом вызове (без кэша) и отдаёт как есть.
    Ошибка чтения, битый JSON или не-массив → CatalogReadError.
    """
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            catalog = json.loads(await f.read())
    except (OSError, ValueError) as e:
        raise CatalogReadError(detail=str(e)) from e

    if not isinstance(catalog, list):
        raise CatalogReadError(detail="catalog must be a JSON array")
    return catalog


def find_perfume(catalog: List[Any], perfume_id: Any) -> Optional[dict]:
    """Поиск по строковому равенству id: "7" == 7, но "07" != 7."""
    wanted = as_text(perfume_id)
    return next(
        (item for item in catalog if isinstance(item, dict) and as_text(item.get("id")) == wanted),
        None,
    )

# shop/routes/perfume.py

from fastapi import APIRouter, Request, status

from shop.services.catalog import read_catalog
from shop.utils.errors import CatalogReadError

router = APIRouter()


@router.get(
    "/perfumes",
    status_code=status.HTTP_200_OK,
    summary="Каталог ароматов",
    response_description="Содержимое perfumes.json без изменений",
    responses={
        200: {"description": "Каталог загружен"},
        500: {"description": "Файл каталога не прочитан"},
    },
)
async def list_perfumes(request: Request):
    log = request.app.state.log
    try:
        catalog = await read_catalog(request.app.state.settings.CATALOG_PATH)
    except CatalogReadError as e:
        await log.log_error("catalog", f"Ошибка чтения каталога: {e.detail}")
        raise

    return {"success": True, "data": catalog}

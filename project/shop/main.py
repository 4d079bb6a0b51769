# shop/main.py

import os
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

# --- загрузка переменных окружения ---
load_dotenv()

from shop.config import Settings, settings as default_settings
from shop.middleware.request_log import RequestLogMiddleware
from shop.services.notifier import Notifier
from shop.utils.errors import ShopError
from shop.utils.log import Log
from shop.utils.workbook import OrderStore

APP_VERSION = "5.1.0"


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    # ────────────── Lifespan ──────────────
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- sync логгер для раннего старта ---
        boot_log = Log(settings.LOG_DIR, settings.LOG_PRINT)
        boot_log.log_info_sync("startup", "lifespan: startup начат")

        app.state.settings = settings
        app.state.log = Log(settings.LOG_DIR, settings.LOG_PRINT)

        # Книга заказов: проверка или пересоздание
        app.state.store = OrderStore(settings.ORDERS_PATH, settings.STORE_BACKUP_ON_REPAIR)
        repaired = await app.state.store.ensure()
        if repaired is None:
            boot_log.log_info_sync("startup", f"Книга заказов в порядке: {settings.ORDERS_PATH}")
        else:
            boot_log.log_warning_sync("startup", f"Книга заказов создана заново: {repaired}")

        # Почта
        app.state.notifier = Notifier(settings, app.state.log)
        if app.state.notifier.enabled:
            boot_log.log_info_sync("startup", "Почтовые уведомления включены", {"to": app.state.notifier.recipient})
        else:
            boot_log.log_warning_sync("startup", "EMAIL_USER/EMAIL_PASS не заданы, уведомления отключены")

        if not settings.ACCESS_KEY:
            boot_log.log_warning_sync("startup", "ACCESS_KEY не задан, /orders недоступен")

        yield

        # shutdown
        await app.state.notifier.drain()
        await app.state.log.log_info("shutdown", "Остановка приложения")
        await app.state.log.shutdown()
        boot_log.log_info_sync("shutdown", "Log корректно завершён")
        await boot_log.shutdown()

    # ────────────── Создаём FastAPI приложение ──────────────
    app = FastAPI(title="Perfume Ordering API", version=APP_VERSION, lifespan=lifespan)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLogMiddleware)

    # ────────────── Ошибки → {"success": false, ...} ──────────────
    @app.exception_handler(ShopError)
    async def shop_error_handler(request: Request, exc: ShopError):
        body = {"success": False, "message": exc.message}
        if exc.status_code >= 500 and exc.detail:
            body["error"] = exc.detail
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"success": False, "message": "Request body must be a JSON object."})

    @app.get("/")
    def read_root():
        return {
            "success": True,
            "message": "🌸 Perfume Ordering API",
            "version": APP_VERSION,
        }

    # ────────────── Подключение роутов ──────────────
    from shop.routes import order, perfume

    app.include_router(perfume.router, tags=["perfume"])
    app.include_router(order.router, tags=["order"])

    # Статика витрины подключается последней, чтобы не перекрывать API
    if os.path.isdir(settings.STATIC_DIR):
        app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")

    return app


app = create_app()


def run():
    uvicorn.run(
        "shop.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level="info",
    )


# ────────────── Запуск uvicorn ──────────────
if __name__ == "__main__":
    run()

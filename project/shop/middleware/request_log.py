# shop/middleware/request_log.py

import time


class RequestLogMiddleware:
    """Пишет в журнал каждый HTTP-запрос: метод, путь, статус, время."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        status_holder = {"status": 500}

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                status_holder["status"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            log = getattr(scope["app"].state, "log", None)
            if log is not None:
                await log.log_info(
                    "http",
                    f"{scope['method']} {scope['path']} → {status_holder['status']}",
                    {"ms": round((time.perf_counter() - started) * 1000, 1)},
                    is_console=False,
                )

# shop/utils/log.py
# Журнал событий магазина

import os
import datetime
import logging
from aiologger import Logger
from aiologger.handlers.files import AsyncFileHandler


class Log:
    """
    Журнал в дневные файлы: <log_dir>/2025/10/04.log

    Асинхронные методы пишут через aiologger, синхронные (для старта
    приложения, когда цикла событий ещё нет) через стандартный logging.
    """

    def __init__(self, log_dir: str = "log", log_print: str | bool = "0"):
        self.log_dir = log_dir
        os.makedirs(self.log_dir, exist_ok=True)
        self.loggers = {}
        if isinstance(log_print, bool):
            self.log_print = log_print
        else:
            self.log_print = str(log_print).lower() in ("1", "true", "yes")

    def build_log_path(self, now: datetime.datetime) -> str:
        base_dir = os.path.join(self.log_dir, f"{now.year}", f"{now:%m}")
        os.makedirs(base_dir, exist_ok=True)
        return os.path.join(base_dir, f"{now:%d}.log")

    def format_line(self, now: datetime.datetime, level: str, target: str, message: str, data: dict | None) -> str:
        line = f"{now:%d.%m.%Y %H:%M:%S} {level:<7} {target}: {message}"
        if data:
            line += f": {self.safe_serialize(data)}"
        return line

    async def get_logger(self, now: datetime.datetime) -> Logger:
        """Логгер для текущего дневного файла; при смене дня файл переоткрывается."""
        log_path = self.build_log_path(now)
        current = self.loggers.get("async")

        if current is None or current["path"] != log_path:
            file_logger = Logger(name="shop")
            file_logger.add_handler(AsyncFileHandler(filename=log_path, mode="a", encoding="utf-8"))
            if current is not None:
                await current["logger"].shutdown()
            self.loggers["async"] = {"path": log_path, "logger": file_logger}

        return self.loggers["async"]["logger"]

    def get_sync_logger(self, now: datetime.datetime) -> logging.Logger:
        log_path = self.build_log_path(now)
        sync_logger = logging.getLogger(f"shop.sync.{id(self)}")
        sync_logger.setLevel(logging.INFO)
        sync_logger.propagate = False

        handler = sync_logger.handlers[0] if sync_logger.handlers else None
        if handler is None or handler.baseFilename != os.path.abspath(log_path):
            if handler is not None:
                sync_logger.removeHandler(handler)
                handler.close()
            handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            handler.setFormatter(logging.Formatter("%(message)s"))
            sync_logger.addHandler(handler)

        return sync_logger

    # ────────────── Асинхронное ──────────────
    async def log(self, level: str, target: str, message: str, data: dict | None = None, is_console: bool = None):
        now = datetime.datetime.now()
        line = self.format_line(now, level, target, message, data)

        file_logger = await self.get_logger(now)
        await file_logger.info(line)

        if (self.log_print if is_console is None else is_console):
            print(line)

    async def log_info(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        await self.log("INFO", target, message, data, is_console)

    async def log_warning(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        await self.log("WARNING", target, message, data, is_console)

    async def log_error(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = True):
        await self.log("ERROR", target, message, data, is_console)

    # ────────────── Синхронное ──────────────
    def log_sync(self, level: str, target: str, message: str, data: dict | None = None, is_console: bool = None):
        now = datetime.datetime.now()
        line = self.format_line(now, level, target, message, data)

        self.get_sync_logger(now).info(line)

        if (self.log_print if is_console is None else is_console):
            print(line)

    def log_info_sync(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        self.log_sync("INFO", target, message, data, is_console)

    def log_warning_sync(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = None):
        self.log_sync("WARNING", target, message, data, is_console)

    def log_error_sync(self, target: str = "", message: str = "", data: dict | None = None, is_console: bool = True):
        self.log_sync("ERROR", target, message, data, is_console)

    def safe_serialize(self, obj):
        """
        Приводим объект к виду, пригодному для записи в лог:
        - dict, list, tuple рекурсивно
        - Pydantic модели через model_dump
        - прочее → строка с типом
        """
        if obj is None or isinstance(obj, (str, int, float, bool)):
            return obj
        elif isinstance(obj, dict):
            return {k: self.safe_serialize(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple, set)):
            return [self.safe_serialize(v) for v in obj]
        elif hasattr(obj, "model_dump"):
            return self.safe_serialize(obj.model_dump())
        else:
            return f"<{type(obj).__name__}>"

    async def shutdown(self):
        current = self.loggers.pop("async", None)
        if current is not None:
            await current["logger"].shutdown()

        sync_logger = logging.getLogger(f"shop.sync.{id(self)}")
        for handler in list(sync_logger.handlers):
            sync_logger.removeHandler(handler)
            handler.close()

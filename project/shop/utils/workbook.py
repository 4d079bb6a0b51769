# shop/utils/workbook.py

"""
Книга заказов в формате xlsx.

Файл содержит один лист "Orders" с фиксированной шапкой из семи колонок
(ORDER_COLUMNS). Любая запись проецируется строго на эти колонки, лишние
поля не попадают в файл никогда.
"""

import os
import asyncio
import datetime
from typing import Optional

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from shop.schemas.order import OrderDraft, PersistedOrder
from shop.utils.errors import StoreCorruptError, StorageWriteError

SHEET_NAME = "Orders"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# ────────────── Колонки: заголовок, ключ, ширина ──────────────
ORDER_COLUMNS = [
    ("Name", "name", 20),
    ("Phone", "phone", 20),
    ("Perfume ID", "perfumeId", 15),
    ("Perfume Name", "perfumeName", 25),
    ("Quantity", "quantity", 10),
    ("Delivery Address", "deliveryAddress", 30),
    ("Date", "date", 25),
]
ORDER_HEADERS = [header for header, _, _ in ORDER_COLUMNS]
ORDER_KEYS = [key for _, key, _ in ORDER_COLUMNS]


def apply_columns(sheet: Worksheet) -> None:
    """Пишет каноническую шапку в первую строку и ширины колонок."""
    for index, (header, _, width) in enumerate(ORDER_COLUMNS, start=1):
        sheet.cell(row=1, column=index, value=header)
        sheet.column_dimensions[get_column_letter(index)].width = width


def header_matches(sheet: Worksheet) -> bool:
    return [cell.value for cell in sheet[1]] == ORDER_HEADERS


def reset_columns(sheet: Worksheet) -> None:
    """Приводит лист к каноническим колонкам: лишние удаляются, шапка переписывается."""
    extra = sheet.max_column - len(ORDER_COLUMNS)
    if extra > 0:
        sheet.delete_cols(len(ORDER_COLUMNS) + 1, extra)
    apply_columns(sheet)


def new_workbook() -> Workbook:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_NAME
    apply_columns(sheet)
    return workbook


def save_workbook(workbook: Workbook, path: str) -> None:
    """Сохраняет книгу целиком: во временный файл рядом, затем атомарная замена."""
    tmp_path = f"{path}.tmp"
    try:
        workbook.save(tmp_path)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def open_store(path: str) -> Workbook:
    """Книга открывается, только если файл есть, читается и содержит лист Orders."""
    if not os.path.isfile(path):
        raise StoreCorruptError(detail=f"file not found: {path}")
    try:
        workbook = load_workbook(path)
    except Exception as e:
        raise StoreCorruptError(detail=str(e)) from e
    if SHEET_NAME not in workbook.sheetnames:
        raise StoreCorruptError(detail=f"worksheet {SHEET_NAME!r} missing")
    return workbook


def ensure_store(path: str, backup: bool = True) -> Optional[str]:
    """
    Проверяет книгу заказов при старте; если её нет или она битая, создаёт
    заново пустую книгу с канонической шапкой. Старое содержимое не
    восстанавливается: при backup=True файл лишь переименовывается в
    <имя>.corrupt-<время>.xlsx.

    Возвращает None, если книга в порядке, иначе причину пересоздания.
    """
    try:
        open_store(path)
        return None
    except StoreCorruptError as e:
        reason = str(e)

    if backup and os.path.exists(path):
        stem, ext = os.path.splitext(path)
        backup_path = f"{stem}.corrupt-{datetime.datetime.now():%Y%m%d-%H%M%S}{ext}"
        os.replace(path, backup_path)
        reason += f" (old file moved to {backup_path})"

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    save_workbook(new_workbook(), path)
    return reason


def append_order(path: str, draft: OrderDraft, now: datetime.datetime | None = None) -> PersistedOrder:
    """
    Дописывает одну строку заказа и сохраняет книгу на диск.

    Дата ставится в момент записи. Любая ошибка чтения/записи → StorageWriteError.
    """
    try:
        workbook = load_workbook(path)
        if SHEET_NAME in workbook.sheetnames:
            sheet = workbook[SHEET_NAME]
        else:
            sheet = workbook.create_sheet(SHEET_NAME)

        # шапку могли поправить руками
        if not header_matches(sheet):
            reset_columns(sheet)

        stamp = (now or datetime.datetime.now()).strftime(DATE_FORMAT)
        order = PersistedOrder(**draft.model_dump(), date=stamp)
        values = order.model_dump()
        sheet.append([values.get(key) or "" for key in ORDER_KEYS])

        save_workbook(workbook, path)
    except Exception as e:
        raise StorageWriteError(detail=str(e)) from e

    return order


class OrderStore:
    """
    Единственный писатель книги заказов.

    Все операции с файлом идут под asyncio.Lock и выполняются в отдельном
    потоке, чтобы openpyxl не блокировал цикл событий.
    """

    def __init__(self, path: str, backup_on_repair: bool = True):
        self.path = path
        self.backup_on_repair = backup_on_repair
        self._lock = asyncio.Lock()

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    async def ensure(self) -> Optional[str]:
        async with self._lock:
            return await asyncio.to_thread(ensure_store, self.path, self.backup_on_repair)

    async def append(self, draft: OrderDraft) -> PersistedOrder:
        async with self._lock:
            return await asyncio.to_thread(append_order, self.path, draft)

# shop/services/notifier.py

"""
Уведомления о новых заказах по e-mail.

Отправка идёт фоновой задачей уже после записи заказа в книгу: ошибка
отправки только пишется в лог и никогда не влияет на ответ клиенту.
"""

import asyncio
import html
from email.message import EmailMessage
from typing import Optional, Set

import aiosmtplib

from shop.config import Settings
from shop.schemas.order import PersistedOrder
from shop.utils.errors import NotificationError
from shop.utils.log import Log

SUBJECT = "🌸 New Perfume Order"


def format_order_html(order: PersistedOrder) -> str:
    """HTML-сводка по всем семи полям заказа."""
    lines = "".join(
        f"<p><strong>{html.escape(key)}:</strong> {html.escape(str(value)) if value else 'N/A'}</p>"
        for key, value in order.model_dump().items()
    )
    return (
        "<h2>🌸 New Perfume Order Received!</h2>"
        f'<div style="font-family: Arial, sans-serif; line-height: 1.6;">{lines}</div>'
    )


class Notifier:
    def __init__(self, settings: Settings, log: Log):
        self.settings = settings
        self.log = log
        self.enabled = settings.email_enabled
        self.sender = settings.EMAIL_USER
        self.recipient = settings.EMAIL_TO or settings.EMAIL_USER
        self._tasks: Set[asyncio.Task] = set()
        self.last_error: Optional[NotificationError] = None

    def build_message(self, order: PersistedOrder) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.recipient
        message["Subject"] = SUBJECT
        message.set_content(
            "\n".join(f"{key}: {value or 'N/A'}" for key, value in order.model_dump().items())
        )
        message.add_alternative(format_order_html(order), subtype="html")
        return message

    async def send(self, order: PersistedOrder) -> None:
        """Отправка письма; любая ошибка транспорта → NotificationError."""
        try:
            await aiosmtplib.send(
                self.build_message(order),
                hostname=self.settings.SMTP_HOST,
                port=self.settings.SMTP_PORT,
                username=self.settings.EMAIL_USER,
                password=self.settings.EMAIL_PASS,
                use_tls=self.settings.SMTP_PORT == 465,
            )
        except Exception as e:
            raise NotificationError(detail=str(e)) from e

    async def _dispatch(self, order: PersistedOrder) -> bool:
        try:
            await self.send(order)
        except NotificationError as e:
            self.last_error = e
            await self.log.log_error("notify", f"Письмо не отправлено: {e.detail}", {"name": order.name})
            return False
        await self.log.log_info("notify", "Письмо о заказе отправлено", {"name": order.name})
        return True

    def notify(self, order: PersistedOrder) -> Optional[asyncio.Task]:
        """
        Запускает отправку в фоне и сразу возвращает управление.
        Если почта не настроена, ничего не делает.
        """
        if not self.enabled:
            return None
        task = asyncio.create_task(self._dispatch(order))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Дожидается всех фоновых отправок (остановка приложения, тесты)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))

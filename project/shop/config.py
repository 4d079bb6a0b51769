# shop/config.py

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    HOST: str = "127.0.0.1"
    PORT: int = 5000

    ORDERS_PATH: str = "orders.xlsx"        # книга заказов (xlsx)
    CATALOG_PATH: str = "perfumes.json"     # каталог товаров
    STATIC_DIR: str = "public"              # клиентские файлы витрины
    STORE_BACKUP_ON_REPAIR: bool = True     # сохранять битый файл перед пересозданием

    ACCESS_KEY: Optional[str] = None        # ключ для выгрузки /orders

    EMAIL_USER: Optional[str] = None
    EMAIL_PASS: Optional[str] = None
    EMAIL_TO: Optional[str] = None          # по умолчанию = EMAIL_USER
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465

    LOG_DIR: str = "log"
    LOG_PRINT: str = "1"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

    @property
    def email_enabled(self) -> bool:
        return bool(self.EMAIL_USER and self.EMAIL_PASS)

settings = Settings()

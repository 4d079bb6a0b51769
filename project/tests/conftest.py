import json

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from shop.config import Settings
from shop.main import create_app
from shop.utils.workbook import ORDER_KEYS, SHEET_NAME

ACCESS_KEY = "test-access-key"

CATALOG = [
    {"id": 1, "name": "Bleu Noir", "brand": "Maison Azur", "size": "100ml", "category": "men", "price": 89},
    {"id": 2, "name": "Rose", "brand": "Atelier Flora", "size": "50ml", "category": "women", "price": 74.5},
    {"id": "7", "name": "Amber Seven", "category": "unisex", "price": 60},
]


def order_payload(**overrides):
    payload = {
        "name": "Ana",
        "phone": "555",
        "perfumeId": "2",
        "quantity": "1",
        "deliveryAddress": "Main St",
    }
    payload.update(overrides)
    return payload


def read_orders(path):
    """Rows of the order log (header excluded) keyed by the canonical columns."""
    sheet = load_workbook(path)[SHEET_NAME]
    return [
        {key: ("" if value is None else value) for key, value in zip(ORDER_KEYS, row)}
        for row in sheet.iter_rows(min_row=2, max_col=len(ORDER_KEYS), values_only=True)
    ]


@pytest.fixture()
def catalog_path(tmp_path):
    path = tmp_path / "perfumes.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    return path


@pytest.fixture()
def settings(tmp_path, catalog_path):
    return Settings(
        ORDERS_PATH=str(tmp_path / "orders.xlsx"),
        CATALOG_PATH=str(catalog_path),
        STATIC_DIR=str(tmp_path / "public"),
        LOG_DIR=str(tmp_path / "log"),
        LOG_PRINT="0",
        ACCESS_KEY=ACCESS_KEY,
        EMAIL_USER=None,
        EMAIL_PASS=None,
        EMAIL_TO=None,
    )


@pytest.fixture()
def email_settings(settings):
    return settings.model_copy(update={"EMAIL_USER": "shop@example.com", "EMAIL_PASS": "app-password"})


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client

"""Tests for the catalog reader."""

import json

import pytest

from shop.services.catalog import as_text, find_perfume, read_catalog
from shop.utils.errors import CatalogReadError


@pytest.mark.asyncio
async def test_read_catalog(catalog_path):
    catalog = await read_catalog(str(catalog_path))
    assert [p["name"] for p in catalog] == ["Bleu Noir", "Rose", "Amber Seven"]
    assert catalog[0]["price"] == 89


@pytest.mark.asyncio
async def test_read_catalog_is_not_cached(catalog_path):
    await read_catalog(str(catalog_path))
    catalog_path.write_text(json.dumps([{"id": 5, "name": "New"}]), encoding="utf-8")
    catalog = await read_catalog(str(catalog_path))
    assert [p["name"] for p in catalog] == ["New"]


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["{broken", '{"id": 1}', '"text"'])
async def test_bad_catalog(tmp_path, content):
    path = tmp_path / "perfumes.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(CatalogReadError) as exc:
        await read_catalog(str(path))
    assert exc.value.detail


@pytest.mark.asyncio
async def test_missing_catalog(tmp_path):
    with pytest.raises(CatalogReadError):
        await read_catalog(str(tmp_path / "absent.json"))


@pytest.mark.asyncio
async def test_entries_are_returned_as_stored(tmp_path):
    raw = [{"id": 1, "name": "X", "price": "89.00", "notes": ["rose"]}, {"id": 2, "brand": 5}]
    path = tmp_path / "perfumes.json"
    path.write_text(json.dumps(raw), encoding="utf-8")
    assert await read_catalog(str(path)) == raw


@pytest.mark.parametrize("value, expected", [(7, "7"), (7.0, "7"), ("07", "07"), (2.5, "2.5"), (None, ""), (True, "true")])
def test_as_text(value, expected):
    assert as_text(value) == expected


def test_find_perfume():
    catalog = ["junk", {"name": "No id"}, {"id": 7, "name": "Seven"}, {"id": "8", "name": "Eight"}]
    assert find_perfume(catalog, "7")["name"] == "Seven"
    assert find_perfume(catalog, 8)["name"] == "Eight"
    assert find_perfume(catalog, "07") is None

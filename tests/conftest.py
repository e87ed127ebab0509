"""Shared test fixtures: sample feeds and an in-memory Supabase stand-in."""

import copy
import itertools
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest


SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE yml_catalog SYSTEM "shops.dtd">
<yml_catalog date="2024-05-01 10:00">
  <shop>
    <name>Svitanok</name>
    <currencies>
      <currency id="UAH" rate="1"/>
    </currencies>
    <categories>
      <category id="12" parentId="10">Креми для обличчя</category>
      <category id="10">Догляд за обличчям</category>
      <category id="20">Догляд за тілом</category>
    </categories>
    <offers>
      <offer id="1001" available="true">
        <name>Крем для обличчя зволожуючий</name>
        <price>450.00</price>
        <oldprice>520</oldprice>
        <currencyId>UAH</currencyId>
        <categoryId>12</categoryId>
        <picture>https://cdn.example.com/1001-1.jpg</picture>
        <picture>https://cdn.example.com/1001-2.jpg</picture>
        <vendor>Nivea</vendor>
        <vendorCode>NV-1001</vendorCode>
        <country_of_origin>Германия</country_of_origin>
        <description><![CDATA[<p>Легкий крем &amp; сироватка</p>]]></description>
        <param name="Пол">Женский</param>
        <param name="Тип кожи">Жирная|Сухая</param>
        <param name="Объем" unit="мл">50</param>
      </offer>
      <offer id="1002" available="false">
        <model>Лосьйон для тіла</model>
        <price>199</price>
        <categoryId>20</categoryId>
        <picture>https://cdn.example.com/1002.jpg</picture>
        <vendor>Nivea</vendor>
        <param name="Страна производитель">Италия</param>
      </offer>
      <offer id="1003">
        <name>Маска для обличчя</name>
        <price>120</price>
        <categoryId>99</categoryId>
        <vendor>La Roche-Posay</vendor>
      </offer>
    </offers>
  </shop>
</yml_catalog>
"""


class FakeAPIError(Exception):
    """Stands in for postgrest's APIError"""


@dataclass
class FakeResponse:
    data: List[Dict[str, Any]]


class FakeTable:
    def __init__(self, name: str, unique: Tuple[Tuple[str, ...], ...] = ()):
        self.name = name
        self.unique = unique
        self.rows: List[Dict[str, Any]] = []
        self._ids = itertools.count(1)

    def find(self, filters: List[Tuple[str, Any]]) -> List[Dict[str, Any]]:
        return [row for row in self.rows if all(row.get(col) == val for col, val in filters)]

    def check_unique(self, row: Dict[str, Any], ignore: Optional[Dict[str, Any]] = None) -> None:
        for columns in self.unique:
            for other in self.rows:
                if other is ignore:
                    continue
                if all(other.get(col) == row.get(col) for col in columns):
                    raise FakeAPIError(
                        f'duplicate key value violates unique constraint "{self.name}_{"_".join(columns)}_key"'
                    )

    def insert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        row = {"id": next(self._ids), **copy.deepcopy(data)}
        self.check_unique(row)
        self.rows.append(row)
        return row

    def update(self, row: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        candidate = {**row, **copy.deepcopy(data)}
        self.check_unique(candidate, ignore=row)
        row.update(candidate)
        return row


class FakeQuery:
    """Chainable subset of the postgrest async request builder"""

    def __init__(self, client: "FakeSupabase", table: FakeTable):
        self.client = client
        self.table = table
        self.op = "select"
        self.payload: Any = None
        self.on_conflict: Optional[str] = None
        self.filters: List[Tuple[str, Any]] = []
        self.max_rows: Optional[int] = None

    def select(self, *columns):
        return self

    def insert(self, data):
        self.op, self.payload = "insert", data
        return self

    def upsert(self, data, on_conflict: str = ""):
        self.op, self.payload, self.on_conflict = "upsert", data, on_conflict
        return self

    def update(self, data):
        self.op, self.payload = "update", data
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    async def execute(self) -> FakeResponse:
        self.client.calls.append((self.table.name, self.op))
        for table, op, predicate in self.client.failures:
            if table == self.table.name and op == self.op and predicate(self.payload, self.filters):
                raise FakeAPIError(f"injected failure on {table}.{op}")

        if self.op == "select":
            rows = self.table.find(self.filters)
        elif self.op == "insert":
            rows = [self.table.insert(self.payload)]
        elif self.op == "upsert":
            keys = [col.strip() for col in self.on_conflict.split(",") if col.strip()]
            existing = self.table.find([(col, self.payload.get(col)) for col in keys])
            if existing:
                rows = [self.table.update(existing[0], self.payload)]
            else:
                rows = [self.table.insert(self.payload)]
        elif self.op == "update":
            rows = [self.table.update(row, self.payload) for row in self.table.find(self.filters)]
        else:
            raise AssertionError(f"unsupported op {self.op}")

        if self.max_rows is not None:
            rows = rows[:self.max_rows]
        return FakeResponse(data=[copy.deepcopy(row) for row in rows])


class FakeSupabase:
    """In-memory replacement for supabase.AsyncClient with the importer's unique keys"""

    def __init__(self):
        self.tables = {
            "brands": FakeTable("brands", unique=(("name",), ("slug",))),
            "categories": FakeTable("categories", unique=(("external_id",),)),
            "products": FakeTable("products", unique=(("external_id",),)),
        }
        self.calls: List[Tuple[str, str]] = []
        self.failures: List[Tuple[str, str, Callable]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, self.tables[name])

    def fail_when(self, table: str, op: str, predicate: Callable = lambda payload, filters: True) -> None:
        """Make matching calls raise FakeAPIError"""
        self.failures.append((table, op, predicate))

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables[table].rows

    def row(self, table: str, **filters) -> Optional[Dict[str, Any]]:
        found = self.tables[table].find(list(filters.items()))
        return found[0] if found else None


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def sample_feed_text():
    return SAMPLE_FEED


@pytest.fixture
def sample_feed_path(tmp_path):
    feed_file = tmp_path / "data.xml"
    feed_file.write_text(SAMPLE_FEED, encoding="utf-8")
    return feed_file


@pytest.fixture
def sequential_random(monkeypatch):
    """Make random.randint deterministic so generated slugs never collide"""
    counter = itertools.count(1)
    monkeypatch.setattr("random.randint", lambda a, b: next(counter))
    return counter

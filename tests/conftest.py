"""Shared pytest fixtures for nodefacade tests.

The ``db_engine`` fixture builds a file-backed SQLite store seeded with a
small repository tree::

    Enterprise (2000)
    ├── Apollo (4000, volume; children filed under -4000)
    │   └── Plans (4001)
    │       └── Budget (4002, document)
    ├── Finance (3000, folder)
    │   ├── Invoice (3001, document, versions 1 and 2)
    │   ├── _system (3002, hidden)
    │   └── Archive (3003, deleted)
    └── Finance Shortcut (3100, alias of 3000)
    Categories (2100)
    └── Finance (9000, category, definition version 2)
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy import insert
from sqlalchemy.engine import Engine

from nodefacade.config.settings import FacadeSettings
from nodefacade.infrastructure.database.engine import create_db_engine, init_database
from nodefacade.infrastructure.database.schema import (
    cat_region_map,
    dtree_core,
    dvers_data,
    k_ini,
    ll_attr_data,
)
from nodefacade.infrastructure.facade import Facade

CREATED = datetime(2024, 1, 15, 9, 30)
MODIFIED = datetime(2024, 2, 1, 17, 0)


def _node(
    data_id: int,
    parent_id: int,
    name: str,
    sub_type: int,
    *,
    version_num: int = 1,
    origin: int = 0,
    deleted: int = 0,
) -> dict[str, Any]:
    return {
        "DataID": data_id,
        "ParentID": parent_id,
        "OwnerID": 1000,
        "VersionNum": version_num,
        "Name": name,
        "SubType": sub_type,
        "OriginDataID": origin,
        "CreateDate": CREATED,
        "ModifyDate": MODIFIED,
        "Deleted": deleted,
    }


def _attr(
    node_id: int,
    ver_num: int,
    def_ver: int,
    attr_id: int,
    attr_type: int,
    **values: Any,
) -> dict[str, Any]:
    row = {
        "ID": node_id,
        "VerNum": ver_num,
        "DefID": 9000,
        "DefVerN": def_ver,
        "AttrID": attr_id,
        "AttrType": attr_type,
        "EntryNum": 1,
        "ValDate": None,
        "ValInt": None,
        "ValLong": None,
        "ValReal": None,
        "ValStr": None,
    }
    row.update(values)
    return row


def seed_repository(engine: Engine) -> None:
    """Insert the fixture tree described in the module docstring."""
    nodes = [
        _node(2000, -1, "Enterprise", 141),
        _node(2100, -1, "Categories", 0),
        _node(3000, 2000, "Finance", 0),
        _node(3001, 3000, "Invoice", 144, version_num=2),
        _node(3002, 3000, "_system", 0),
        _node(3003, 3000, "Archive", 0, deleted=1),
        _node(3100, 2000, "Finance Shortcut", 1, origin=3000),
        _node(4000, 2000, "Apollo", 848),
        _node(-4000, 2000, "Apollo", 848),
        _node(4001, -4000, "Plans", 0),
        _node(4002, 4001, "Budget", 144),
        _node(9000, 2100, "Finance", 131, version_num=2),
    ]
    versions = [
        {
            "VersionID": 501,
            "DocID": 3001,
            "Version": 2,
            "VerCDate": MODIFIED,
            "VerMDate": MODIFIED,
            "FileCDate": MODIFIED,
            "FileMDate": MODIFIED,
            "FileName": "invoice-v2.pdf",
            "DataSize": 2048,
            "MimeType": "application/pdf",
        },
        {
            "VersionID": 500,
            "DocID": 3001,
            "Version": 1,
            "VerCDate": CREATED,
            "VerMDate": CREATED,
            "FileCDate": CREATED,
            "FileMDate": CREATED,
            "FileName": "invoice-v1.pdf",
            "DataSize": 1024,
            "MimeType": "application/pdf",
        },
    ]
    regions = [
        {"CatID": 9000, "CatName": "Finance", "SetName": None, "AttrName": "Status",
         "AttrType": -1, "RegionName": "Attr_9000_2"},
        {"CatID": 9000, "CatName": "Finance", "SetName": None, "AttrName": "Amount",
         "AttrType": 2, "RegionName": "Attr_9000_3"},
        {"CatID": 9000, "CatName": "Finance", "SetName": None, "AttrName": "Due Date",
         "AttrType": -7, "RegionName": "Attr_9000_4"},
    ]
    attributes = [
        _attr(3001, 2, 2, 2, -1, ValStr="Approved"),
        _attr(3001, 2, 2, 3, 2, ValInt=150),
        _attr(3001, 2, 2, 4, -7, ValDate=datetime(2024, 3, 31)),
        # stale node version
        _attr(3001, 1, 2, 2, -1, ValStr="Draft"),
        # stale category definition version
        _attr(3001, 2, 1, 2, -1, ValStr="Legacy"),
        _attr(4001, 1, 2, 2, -1, ValStr="Pending"),
        _attr(4001, 1, 2, 3, 2, ValInt=40),
        # two slots populated; the integer wins
        _attr(4002, 1, 2, 3, 2, ValInt=75, ValStr="seventy-five"),
    ]
    with engine.begin() as conn:
        conn.execute(insert(dtree_core), nodes)
        conn.execute(insert(dvers_data), versions)
        conn.execute(insert(cat_region_map), regions)
        conn.execute(insert(ll_attr_data), attributes)
        conn.execute(
            insert(k_ini),
            [{"IniSection": "General", "IniKeyword": "DatabaseVersion", "IniValue": "16.2.0"}],
        )


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'store.db'}"


@pytest.fixture
def db_engine(store_url: str) -> Iterator[Engine]:
    """Initialized and seeded SQLite store."""
    engine = init_database(create_db_engine(store_url))
    seed_repository(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(store_url: str, monkeypatch: pytest.MonkeyPatch) -> FacadeSettings:
    """Settings pointing at the fixture store with an ``ent`` path expansion."""
    monkeypatch.delenv("NODEFACADE_CONFIG", raising=False)
    return FacadeSettings(
        store={"url": store_url, "pool_size": 2},
        paths={"expansions": {"ent": "Enterprise", "fin": "Enterprise/Finance"}},
    )


@pytest.fixture
def facade(settings: FacadeSettings, db_engine: Engine, clock: FakeClock) -> Iterator[Facade]:
    """Facade over the seeded store with a controllable cache clock."""
    f = Facade(settings, engine=db_engine, clock=clock)
    try:
        yield f
    finally:
        f.close()


@pytest.fixture
def config_file(tmp_path: Path, db_engine: Engine, store_url: str) -> Path:
    """nodefacade.toml pointing at the seeded store, for CLI tests."""
    path = tmp_path / "nodefacade.toml"
    path.write_text(
        f'[store]\nurl = "{store_url}"\npool_size = 2\n\n'
        '[paths]\nexpansions = { ent = "Enterprise" }\n',
        encoding="utf-8",
    )
    return path

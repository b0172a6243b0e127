from __future__ import annotations

import pytest
import pytest_asyncio

from vehicle_intel import db

from .fakes import FakeNHTSA


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    # Each test gets its own ledger file and a fresh engine bound to its event loop.
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setattr(db, "_engine", None)
    monkeypatch.setattr(db, "_session_factory", None)


@pytest_asyncio.fixture
async def ledger_db():
    await db.init_db()
    try:
        yield
    finally:
        await db.close_db()


@pytest.fixture
def nhtsa() -> FakeNHTSA:
    return FakeNHTSA()

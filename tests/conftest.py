import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

os.environ.setdefault("RETAIL_INVENTORY_DB", str(Path(tempfile.mkdtemp()) / "test.sqlite3"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from retail_inventory import crud, models, schemas  # noqa: F401 - registers the tables
from retail_inventory.app import create_app
from retail_inventory.database import Base, init_database
from retail_inventory.dependencies import get_db


def _create_test_engine():
    return create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)


@pytest.fixture(name="db_engine")
def db_engine_fixture() -> Generator[Any, None, None]:
    engine = _create_test_engine()
    init_database(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="db_session")
def db_session_fixture(db_engine) -> Generator[Session, None, None]:
    with Session(db_engine) as session:
        yield session


@pytest.fixture(name="catalog")
def catalog_fixture(db_session: Session) -> dict[str, str]:
    """Two items and two stores, keyed by short names."""

    return {
        "X": crud.create_item(db_session, schemas.ItemCreate(sku="SKU-X", name="Item X")).id,
        "Y": crud.create_item(db_session, schemas.ItemCreate(sku="SKU-Y", name="Item Y")).id,
        "A": crud.create_store(db_session, schemas.StoreCreate(name="Store A")).id,
        "B": crud.create_store(db_session, schemas.StoreCreate(name="Store B")).id,
    }


@pytest.fixture(name="client")
def client_fixture(db_engine):  # type: ignore[annotations]
    app = create_app()

    def get_db_override() -> Generator[Session, None, None]:
        with Session(db_engine) as session:
            yield session

    app.dependency_overrides[get_db] = get_db_override

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()

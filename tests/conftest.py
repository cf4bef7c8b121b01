"""Shared fixtures: sample listings, catalogs on both backends, an HTTP client."""

import pytest
from fastapi.testclient import TestClient

from classifieds.catalog.schemas import ItemInfo
from classifieds.catalog.store import CallContext, Catalog
from classifieds.config import Settings
from classifieds.main import create_app
from classifieds.storage import JsonDirectoryStorage, MemoryStorage

CALLER = "alice.testnet"


def make_listing(post_id, **overrides):
    fields = dict(
        creator=CALLER,
        post_id=post_id,
        date=1_690_000_000_000_000_000,
        category="finance",
        title="Looking for a financal tech",
        description=(
            "This job is looking for a person to do all the money making "
            "I sit back and watch"
        ),
        image=None,
        location="remote",
        price=None,
        details=None,
    )
    fields.update(overrides)
    return ItemInfo(**fields)


@pytest.fixture
def ctx():
    return CallContext(caller_id=CALLER)


@pytest.fixture
def catalog():
    return Catalog(MemoryStorage())


@pytest.fixture
def json_catalog(tmp_path):
    return Catalog(JsonDirectoryStorage(tmp_path / "catalog"))


@pytest.fixture
def client(catalog):
    settings = Settings(storage_backend="memory", log_level="WARNING")
    with TestClient(create_app(catalog=catalog, settings=settings)) as c:
        yield c


@pytest.fixture
def listing():
    """Factory for listings: ``listing(post_id, **field_overrides)``."""
    return make_listing

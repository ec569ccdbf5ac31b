"""Tests for the storefront home read path."""

from decimal import Decimal

import pytest

from storefront.core.catalog_cache import CatalogCache
from storefront.core.errors import DataAccessError
from storefront.core.home_service import HomeService
from storefront.core.models import (
    Album,
    Artist,
    ErrorView,
    Genre,
    StatusCodePageView,
    TopAlbumsView,
)
from storefront.tests.fakes import FakeCatalogStorePort


@pytest.fixture
def catalog() -> FakeCatalogStorePort:
    albums = [
        Album(
            album_id=n,
            title=f"Album {n}",
            artist_id=n,
            genre_id=n,
            price=Decimal("8.99"),
            artist=Artist(n, f"Artist Name {n}"),
            genre=Genre(n, f"Genre Name {n}"),
        )
        for n in range(1, 11)
    ]
    return FakeCatalogStorePort(albums)


@pytest.mark.asyncio
async def test_index_gets_six_top_albums(catalog: FakeCatalogStorePort) -> None:
    home = HomeService(CatalogCache(catalog))

    outcome = await home.index()

    assert isinstance(outcome, TopAlbumsView)
    assert outcome.view == "Index"
    assert len(outcome.model) == 6


@pytest.mark.asyncio
async def test_index_uses_configured_count(catalog: FakeCatalogStorePort) -> None:
    home = HomeService(CatalogCache(catalog), top_selling_count=3)

    outcome = await home.index()

    assert len(outcome.model) == 3
    assert catalog.list_calls == [3]


@pytest.mark.asyncio
async def test_repeated_index_served_from_cache(catalog: FakeCatalogStorePort) -> None:
    home = HomeService(CatalogCache(catalog))

    first = await home.index()
    second = await home.index()

    assert first == second
    assert catalog.list_calls == [6]


@pytest.mark.asyncio
async def test_index_propagates_store_failure(catalog: FakeCatalogStorePort) -> None:
    catalog.error = DataAccessError("catalog unreachable")
    home = HomeService(CatalogCache(catalog))

    with pytest.raises(DataAccessError):
        await home.index()


def test_error_returns_shared_error_view(catalog: FakeCatalogStorePort) -> None:
    outcome = HomeService(CatalogCache(catalog)).error()

    assert outcome == ErrorView(view="~/Views/Shared/Error.cshtml")


def test_status_code_page(catalog: FakeCatalogStorePort) -> None:
    outcome = HomeService(CatalogCache(catalog)).status_code_page()

    assert isinstance(outcome, StatusCodePageView)
    assert outcome.view == "~/Views/Shared/StatusCodePage.cshtml"


def test_non_positive_count_rejected(catalog: FakeCatalogStorePort) -> None:
    with pytest.raises(ValueError):
        HomeService(CatalogCache(catalog), top_selling_count=0)

"""Integration tests for the SQLite order and catalog stores."""

import tempfile
from collections.abc import AsyncIterator
from decimal import Decimal
from pathlib import Path

import pytest

from storefront.adapters.store.sqlite import (
    SQLiteCatalogStore,
    SQLiteDatabase,
    SQLiteOrderStore,
)
from storefront.core.cancellation import CancellationToken
from storefront.core.catalog_cache import CatalogCache
from storefront.core.checkout_service import CheckoutService
from storefront.core.errors import DataAccessError
from storefront.core.models import Accepted, Album, Artist, Completed, ErrorView, Genre, Order


@pytest.fixture
async def database() -> AsyncIterator[SQLiteDatabase]:
    """Create a temporary SQLite database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db = SQLiteDatabase(str(Path(tmpdir) / "test.db"))
        yield db
        await db.close_pool()


@pytest.fixture
async def catalog(database: SQLiteDatabase) -> SQLiteCatalogStore:
    """Catalog of ten fully linked albums."""
    store = database.catalog_store()
    for n in range(1, 11):
        await store.add_genre(Genre(genre_id=n, name=f"Genre Name {n}"))
        await store.add_artist(Artist(artist_id=n, name=f"Artist Name {n}"))
        await store.add_album(
            Album(
                album_id=n,
                title=f"Album {n}",
                artist_id=n,
                genre_id=n,
                price=Decimal("8.99"),
            )
        )
    return store


# ============================================================================
# Order store
# ============================================================================


@pytest.mark.asyncio
async def test_saved_order_visible_to_new_store(database: SQLiteDatabase) -> None:
    async with database.order_store() as orders:
        order_id = await orders.create(
            Order(username="TestUserA", first_name="Ada", total=Decimal("17.98"))
        )
        await orders.save()

    async with database.order_store() as orders:
        loaded = await orders.get_by_id(order_id)

    assert loaded is not None
    assert loaded.order_id == order_id
    assert loaded.username == "TestUserA"
    assert loaded.first_name == "Ada"
    assert loaded.total == Decimal("17.98")


@pytest.mark.asyncio
async def test_caller_supplied_order_id(database: SQLiteDatabase) -> None:
    async with database.order_store() as orders:
        order_id = await orders.create(Order(order_id=100, username="TestUserA"))
        await orders.save()

        assert order_id == 100
        assert (await orders.get_by_id(100)) is not None


@pytest.mark.asyncio
async def test_staged_order_readable_before_save(database: SQLiteDatabase) -> None:
    async with database.order_store() as orders:
        order_id = await orders.create(Order(username="TestUserA"))

        staged = await orders.get_by_id(order_id)

        assert staged is not None
        assert staged.username == "TestUserA"


@pytest.mark.asyncio
async def test_discarded_order_is_not_persisted(database: SQLiteDatabase) -> None:
    async with database.order_store() as orders:
        order_id = await orders.create(Order(username="TestUserA"))
        await orders.discard()

        assert await orders.get_by_id(order_id) is None


@pytest.mark.asyncio
async def test_unsaved_order_rolled_back_on_close(database: SQLiteDatabase) -> None:
    orders = SQLiteOrderStore(database)
    order_id = await orders.create(Order(username="TestUserA"))
    await orders.close()

    async with database.order_store() as fresh:
        assert await fresh.get_by_id(order_id) is None


@pytest.mark.asyncio
async def test_duplicate_order_id_raises_data_access_error(
    database: SQLiteDatabase,
) -> None:
    async with database.order_store() as orders:
        await orders.create(Order(order_id=100, username="TestUserA"))
        await orders.save()

        with pytest.raises(DataAccessError):
            await orders.create(Order(order_id=100, username="OtherUser"))


@pytest.mark.asyncio
async def test_order_date_round_trips(database: SQLiteDatabase) -> None:
    service_orders = database.order_store()
    service = CheckoutService(service_orders)
    order = Order(username="", first_name="Ada")

    outcome = await service.submit_address_and_payment(
        order, "FREE", CancellationToken(), principal_name="TestUserA"
    )
    await service_orders.close()

    assert isinstance(outcome, Accepted)
    async with database.order_store() as orders:
        loaded = await orders.get_by_id(outcome.order_id)
    assert loaded is not None
    assert loaded.order_date == order.order_date
    assert loaded.promo_code == "FREE"


@pytest.mark.asyncio
async def test_malformed_row_raises_data_access_error(
    database: SQLiteDatabase,
) -> None:
    conn = await database.acquire()
    try:
        await conn.execute(
            "INSERT INTO orders (order_id, username, total) VALUES (5, 'TestUserA', 'abc')"
        )
        await conn.commit()
    finally:
        await database.release(conn)

    async with database.order_store() as orders:
        with pytest.raises(DataAccessError, match="Row parsing failed"):
            await orders.get_by_id(5)


@pytest.mark.asyncio
async def test_checkout_completion_against_sqlite(database: SQLiteDatabase) -> None:
    async with database.order_store() as orders:
        await orders.create(Order(order_id=100, username="TestUserA"))
        await orders.save()

    async with database.order_store() as orders:
        service = CheckoutService(orders)
        assert await service.complete(100, "TestUserA") == Completed(100)
        assert await service.complete(100, "OtherUser") == ErrorView()
        assert await service.complete(101, "TestUserA") == ErrorView()


# ============================================================================
# Catalog store
# ============================================================================


@pytest.mark.asyncio
async def test_ranked_listing_limited_and_resolved(catalog: SQLiteCatalogStore) -> None:
    albums = await catalog.list_albums_ranked_by_sales(6)

    assert len(albums) == 6
    for album in albums:
        assert album.artist is not None
        assert album.genre is not None
        assert album.artist.name == f"Artist Name {album.album_id}"


@pytest.mark.asyncio
async def test_ranking_by_sales_with_id_tie_break(catalog: SQLiteCatalogStore) -> None:
    await catalog.add_order_detail(order_id=1, album_id=7, quantity=1)
    await catalog.add_order_detail(order_id=2, album_id=7, quantity=1)
    await catalog.add_order_detail(order_id=3, album_id=3, quantity=2)

    albums = await catalog.list_albums_ranked_by_sales(4)

    assert [album.album_id for album in albums] == [7, 3, 1, 2]


@pytest.mark.asyncio
async def test_orphaned_albums_excluded(catalog: SQLiteCatalogStore) -> None:
    await catalog.add_album(Album(album_id=11, title="No Artist", artist_id=99, genre_id=1))
    await catalog.add_album(Album(album_id=12, title="No Genre", artist_id=1, genre_id=99))
    for _ in range(3):
        await catalog.add_order_detail(order_id=1, album_id=11)
        await catalog.add_order_detail(order_id=1, album_id=12)

    albums = await catalog.list_albums_ranked_by_sales(20)

    assert len(albums) == 10
    assert {album.album_id for album in albums}.isdisjoint({11, 12})


@pytest.mark.asyncio
async def test_small_catalog_returns_all(database: SQLiteDatabase) -> None:
    store = database.catalog_store()
    await store.add_genre(Genre(genre_id=1, name="Rock"))
    await store.add_artist(Artist(artist_id=1, name="Artist"))
    await store.add_album(Album(album_id=1, title="Only", artist_id=1, genre_id=1))

    albums = await store.list_albums_ranked_by_sales(6)

    assert [album.album_id for album in albums] == [1]


@pytest.mark.asyncio
async def test_cache_over_sqlite_catalog(catalog: SQLiteCatalogStore) -> None:
    cache = CatalogCache(catalog)

    first = await cache.get_top_selling_albums(6)
    await catalog.add_order_detail(order_id=1, album_id=10)
    second = await cache.get_top_selling_albums(6)
    cache.invalidate()
    third = await cache.get_top_selling_albums(6)

    assert second == first
    assert first[0].album_id == 1
    assert third[0].album_id == 10


@pytest.mark.asyncio
async def test_invalid_quantity_rejected(catalog: SQLiteCatalogStore) -> None:
    with pytest.raises(ValueError):
        await catalog.add_order_detail(order_id=1, album_id=1, quantity=0)


@pytest.mark.asyncio
async def test_unreachable_database_raises_data_access_error() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        # A directory can not be opened as a database file
        db = SQLiteDatabase(str(Path(tmpdir) / "as_dir" / "db"))
        Path(db.db_path).mkdir()

        with pytest.raises(DataAccessError):
            await db.catalog_store().list_albums_ranked_by_sales(6)

        await db.close_pool()

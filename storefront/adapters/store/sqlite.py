"""SQLite store adapters.

Implements OrderStorePort and CatalogStorePort using SQLite with aiosqlite
for async access. All adapters share one SQLiteDatabase, which owns the
connection pool and the schema.
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import aiosqlite

from storefront.core.errors import DataAccessError
from storefront.core.models import Album, Artist, Genre, Order
from storefront.core.ports import CatalogStorePort, OrderStorePort

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS genres (
        genre_id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT ''
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS artists (
        artist_id INTEGER PRIMARY KEY,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS albums (
        album_id INTEGER PRIMARY KEY,
        title TEXT NOT NULL,
        artist_id INTEGER NOT NULL,
        genre_id INTEGER NOT NULL,
        price TEXT NOT NULL DEFAULT '0',
        album_art_url TEXT NOT NULL DEFAULT ''
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS orders (
        order_id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT NOT NULL,
        first_name TEXT NOT NULL DEFAULT '',
        last_name TEXT NOT NULL DEFAULT '',
        address TEXT NOT NULL DEFAULT '',
        city TEXT NOT NULL DEFAULT '',
        state TEXT NOT NULL DEFAULT '',
        postal_code TEXT NOT NULL DEFAULT '',
        country TEXT NOT NULL DEFAULT '',
        phone TEXT NOT NULL DEFAULT '',
        email TEXT NOT NULL DEFAULT '',
        promo_code TEXT,
        total TEXT NOT NULL DEFAULT '0',
        order_date TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_details (
        order_detail_id INTEGER PRIMARY KEY AUTOINCREMENT,
        order_id INTEGER NOT NULL,
        album_id INTEGER NOT NULL,
        quantity INTEGER NOT NULL DEFAULT 1,
        unit_price TEXT NOT NULL DEFAULT '0'
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_order_details_album ON order_details(album_id)",
    "CREATE INDEX IF NOT EXISTS idx_orders_username ON orders(username)",
)

_ORDER_COLUMNS = (
    "order_id",
    "username",
    "first_name",
    "last_name",
    "address",
    "city",
    "state",
    "postal_code",
    "country",
    "phone",
    "email",
    "promo_code",
    "total",
    "order_date",
)


class SQLiteDatabase:
    """Connection pool and schema owner for the storefront database."""

    def __init__(self, db_path: str, pool_size: int = 5):
        """Initialize the database with connection pooling.

        Args:
            db_path: Path to SQLite database file.
            pool_size: Number of connections to maintain in the pool.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._pool: list[aiosqlite.Connection] = []
        self._pool_lock = asyncio.Lock()
        self._schema_lock = asyncio.Lock()
        self._pool_size = pool_size
        self._schema_initialized = False

    async def acquire(self) -> aiosqlite.Connection:
        """Get a connection from the pool or open a new one."""
        await self._init_schema()
        return await self._get_connection()

    async def _get_connection(self) -> aiosqlite.Connection:
        async with self._pool_lock:
            if self._pool:
                return self._pool.pop()
        try:
            conn = await aiosqlite.connect(str(self.db_path))
            await conn.execute("PRAGMA foreign_keys = ON")
        except aiosqlite.Error as e:
            raise DataAccessError(f"Cannot open database {self.db_path}: {e}") from e
        return conn

    async def release(self, conn: aiosqlite.Connection) -> None:
        """Return a connection to the pool."""
        async with self._pool_lock:
            if len(self._pool) < self._pool_size:
                self._pool.append(conn)
                return
        await conn.close()

    async def close_pool(self) -> None:
        """Close all pooled connections."""
        async with self._pool_lock:
            for conn in self._pool:
                await conn.close()
            self._pool.clear()

    async def _init_schema(self) -> None:
        """Create tables on first use. Subsequent calls are no-ops."""
        if self._schema_initialized:
            return
        async with self._schema_lock:
            # Check again after acquiring lock to prevent race
            if self._schema_initialized:
                return

            conn = await self._get_connection()
            try:
                for statement in _SCHEMA:
                    await conn.execute(statement)
                await conn.commit()
                self._schema_initialized = True
                logger.debug(f"Schema initialized at {self.db_path}")
            except aiosqlite.Error as e:
                raise DataAccessError(f"Schema initialization failed: {e}") from e
            finally:
                await self.release(conn)

    def order_store(self) -> "SQLiteOrderStore":
        """Create a request-scoped order store."""
        return SQLiteOrderStore(self)

    def catalog_store(self) -> "SQLiteCatalogStore":
        return SQLiteCatalogStore(self)


class SQLiteOrderStore(OrderStorePort):
    """Unit of work over a single pooled connection.

    create() inserts inside an open transaction, get_by_id() reads on the
    same connection (so staged orders are visible), save() commits and
    discard() rolls back. close() hands the connection back to the pool,
    rolling back anything left unsaved.
    """

    def __init__(self, database: SQLiteDatabase):
        self.database = database
        self._conn: aiosqlite.Connection | None = None

    async def _connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            self._conn = await self.database.acquire()
        return self._conn

    async def create(self, order: Order) -> int:
        conn = await self._connection()
        values = _order_to_row(order)
        columns = list(_ORDER_COLUMNS)
        if order.order_id is None:
            columns.remove("order_id")
            values = values[1:]
        placeholders = ", ".join("?" for _ in columns)
        try:
            cursor = await conn.execute(
                f"INSERT INTO orders ({', '.join(columns)}) VALUES ({placeholders})",
                values,
            )
        except aiosqlite.Error as e:
            raise DataAccessError(f"Failed to create order: {e}") from e

        order_id = order.order_id if order.order_id is not None else cursor.lastrowid
        if order_id is None:
            raise DataAccessError("Database did not assign an order id")
        logger.debug(f"Staged order {order_id}", extra={"order_id": order_id})
        return order_id

    async def get_by_id(self, order_id: int) -> Order | None:
        conn = await self._connection()
        try:
            cursor = await conn.execute(
                f"SELECT {', '.join(_ORDER_COLUMNS)} FROM orders WHERE order_id = ?",
                (order_id,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DataAccessError(f"Failed to load order {order_id}: {e}") from e
        if row is None:
            return None
        return _row_to_order(row)

    async def save(self) -> None:
        conn = await self._connection()
        try:
            await conn.commit()
        except aiosqlite.Error as e:
            raise DataAccessError(f"Failed to save orders: {e}") from e

    async def discard(self) -> None:
        if self._conn is None:
            return
        try:
            await self._conn.rollback()
        except aiosqlite.Error as e:
            raise DataAccessError(f"Failed to discard staged orders: {e}") from e

    async def close(self) -> None:
        """Roll back unsaved work and return the connection to the pool."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            await conn.rollback()
        finally:
            await self.database.release(conn)

    async def __aenter__(self) -> "SQLiteOrderStore":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class SQLiteCatalogStore(CatalogStorePort):
    """Catalog queries and seed helpers."""

    def __init__(self, database: SQLiteDatabase):
        self.database = database

    async def _execute_write(self, sql: str, params: Sequence[Any]) -> None:
        conn = await self.database.acquire()
        try:
            await conn.execute(sql, params)
            await conn.commit()
        except aiosqlite.Error as e:
            await conn.rollback()
            raise DataAccessError(f"Catalog write failed: {e}") from e
        finally:
            await self.database.release(conn)

    async def add_genre(self, genre: Genre) -> None:
        await self._execute_write(
            "INSERT INTO genres (genre_id, name, description) VALUES (?, ?, ?)",
            (genre.genre_id, genre.name, genre.description),
        )

    async def add_artist(self, artist: Artist) -> None:
        await self._execute_write(
            "INSERT INTO artists (artist_id, name) VALUES (?, ?)",
            (artist.artist_id, artist.name),
        )

    async def add_album(self, album: Album) -> None:
        """Insert an album. Its artist and genre need not exist yet."""
        await self._execute_write(
            """
            INSERT INTO albums
            (album_id, title, artist_id, genre_id, price, album_art_url)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                album.album_id,
                album.title,
                album.artist_id,
                album.genre_id,
                str(album.price),
                album.album_art_url,
            ),
        )

    async def add_order_detail(
        self,
        order_id: int,
        album_id: int,
        quantity: int = 1,
        unit_price: Decimal = Decimal("0"),
    ) -> None:
        """Record an album sold as part of an order."""
        if quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")
        await self._execute_write(
            """
            INSERT INTO order_details (order_id, album_id, quantity, unit_price)
            VALUES (?, ?, ?, ?)
            """,
            (order_id, album_id, quantity, str(unit_price)),
        )

    async def list_albums_ranked_by_sales(self, limit: int) -> list[Album]:
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        conn = await self.database.acquire()
        try:
            cursor = await conn.execute(
                """
                SELECT al.album_id, al.title, al.artist_id, al.genre_id,
                       al.price, al.album_art_url,
                       ar.name, g.name, g.description,
                       COUNT(od.order_detail_id) AS sales
                FROM albums al
                JOIN artists ar ON ar.artist_id = al.artist_id
                JOIN genres g ON g.genre_id = al.genre_id
                LEFT JOIN order_details od ON od.album_id = al.album_id
                GROUP BY al.album_id
                ORDER BY sales DESC, al.album_id ASC
                LIMIT ?
                """,
                (limit,),
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DataAccessError(f"Best-seller query failed: {e}") from e
        finally:
            await self.database.release(conn)

        return [_row_to_album(row) for row in rows]


def _order_to_row(order: Order) -> tuple[Any, ...]:
    return (
        order.order_id,
        order.username,
        order.first_name,
        order.last_name,
        order.address,
        order.city,
        order.state,
        order.postal_code,
        order.country,
        order.phone,
        order.email,
        order.promo_code,
        str(order.total),
        order.order_date.isoformat() if order.order_date else None,
    )


def _row_to_order(row: Sequence[Any]) -> Order:
    """Convert an orders row to an Order.

    Raises:
        DataAccessError: If the row is malformed.
    """
    if len(row) != len(_ORDER_COLUMNS):
        raise DataAccessError(
            f"Row parsing failed: expected {len(_ORDER_COLUMNS)} columns, got {len(row)}"
        )
    data = dict(zip(_ORDER_COLUMNS, row))
    try:
        data["total"] = Decimal(data["total"])
        if data["order_date"] is not None:
            data["order_date"] = datetime.fromisoformat(data["order_date"])
    except (ArithmeticError, ValueError) as e:
        raise DataAccessError(f"Row parsing failed for order {data['order_id']}: {e}") from e
    return Order(**data)


def _row_to_album(row: Sequence[Any]) -> Album:
    (
        album_id,
        title,
        artist_id,
        genre_id,
        price,
        album_art_url,
        artist_name,
        genre_name,
        genre_description,
        _sales,
    ) = row
    return Album(
        album_id=album_id,
        title=title,
        artist_id=artist_id,
        genre_id=genre_id,
        price=Decimal(price),
        album_art_url=album_art_url,
        artist=Artist(artist_id=artist_id, name=artist_name),
        genre=Genre(genre_id=genre_id, name=genre_name, description=genre_description),
    )

"""Durable storage for the most recently selected city."""

import asyncio
import logging
import sqlite3
from pathlib import Path

from skyview.config.defaults import LAST_CITY_KEY
from skyview.storage import state_repo
from skyview.storage.database import connect, run_migrations

logger = logging.getLogger(__name__)


class LastCityStore:
    """Reads and writes one city name in the app database.

    Storage failures never propagate: a failed read means "nothing stored"
    and a failed write is logged and dropped.
    """

    def __init__(self, db_path: str | Path, key: str = LAST_CITY_KEY):
        self.db_path = Path(db_path)
        self.key = key

    async def get(self) -> str | None:
        try:
            return await asyncio.to_thread(self._read)
        except (sqlite3.Error, OSError):
            logger.exception("Could not read last city from %s", self.db_path)
            return None

    async def set(self, city_name: str) -> None:
        try:
            await asyncio.to_thread(self._write, city_name)
        except (sqlite3.Error, OSError):
            logger.exception("Could not persist last city %r", city_name)

    async def clear(self) -> None:
        try:
            await asyncio.to_thread(self._delete)
        except (sqlite3.Error, OSError):
            logger.exception("Could not clear last city in %s", self.db_path)

    def _read(self) -> str | None:
        if not self.db_path.exists():
            return None
        conn = self._open()
        try:
            value = state_repo.get_value(conn, self.key)
        finally:
            conn.close()
        return value or None

    def _write(self, city_name: str) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._open()
        try:
            state_repo.set_value(conn, self.key, city_name)
        finally:
            conn.close()
        logger.debug("Persisted last city %r", city_name)

    def _delete(self) -> None:
        if not self.db_path.exists():
            return
        conn = self._open()
        try:
            state_repo.delete_value(conn, self.key)
        finally:
            conn.close()
        logger.info("Cleared last city")

    def _open(self) -> sqlite3.Connection:
        conn = connect(self.db_path)
        run_migrations(conn)
        return conn

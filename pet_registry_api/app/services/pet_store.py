"""
Durable record store for pets.

``PetStore`` is an ordered mapping from a string identifier to a
``Pet`` record, persisted in the ``pets`` table of a SQLite database.
Records are stored as JSON documents; keys are kept in primary-key
order, so ``values()`` always enumerates records sorted by id.

Writes are bounded by a maximum key size and a maximum value size
(both in bytes of UTF-8).  Oversized writes raise ``StorageError``
instead of being truncated.
"""

import logging
import sqlite3
from typing import Iterable, List, Optional

from pet_registry_api.app.core.db import get_connection, get_cursor, init_db
from pet_registry_api.app.core.errors import StorageError
from pet_registry_api.app.schemas.pet import Pet


logger = logging.getLogger(__name__)


class PetStore:
    """Ordered id → ``Pet`` map backed by SQLite."""

    def __init__(self, database_url: str, max_key_size: int = 44, max_value_size: int = 1024) -> None:
        self.database_url = database_url
        self.max_key_size = max_key_size
        self.max_value_size = max_value_size
        try:
            init_db(database_url)
        except sqlite3.Error as e:
            logger.error("Failed to initialise pet store at %s: %s", database_url, e)
            raise StorageError(f"Failed to initialise pet store: {e}") from e

    def insert(self, pet_id: str, pet: Pet) -> None:
        """Insert or overwrite the record stored under ``pet_id``."""
        key_size = len(pet_id.encode("utf-8"))
        if key_size > self.max_key_size:
            raise StorageError(
                f"Key of {key_size} bytes exceeds the limit of {self.max_key_size} bytes"
            )
        value = pet.model_dump_json()
        value_size = len(value.encode("utf-8"))
        if value_size > self.max_value_size:
            raise StorageError(
                f"Record of {value_size} bytes exceeds the limit of {self.max_value_size} bytes"
            )
        conn = get_connection(self.database_url)
        try:
            conn.execute(
                "INSERT INTO pets (id, value) VALUES (?, ?)"
                " ON CONFLICT(id) DO UPDATE SET value = excluded.value",
                (pet_id, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            logger.error("Failed to store pet %s: %s", pet_id, e)
            raise StorageError(f"Failed to store pet {pet_id}: {e}") from e
        finally:
            conn.close()

    def get(self, pet_id: str) -> Optional[Pet]:
        """Return the record stored under ``pet_id`` or ``None``."""
        conn = get_connection(self.database_url)
        try:
            row = conn.execute("SELECT value FROM pets WHERE id = ?", (pet_id,)).fetchone()
        except sqlite3.Error as e:
            logger.error("Failed to read pet %s: %s", pet_id, e)
            raise StorageError(f"Failed to read pet {pet_id}: {e}") from e
        finally:
            conn.close()
        if not row:
            return None
        return Pet.model_validate_json(row["value"])

    def values(self) -> List[Pet]:
        """Return a snapshot of all records ordered by id."""
        conn = get_connection(self.database_url)
        try:
            rows = conn.execute("SELECT value FROM pets ORDER BY id").fetchall()
        except sqlite3.Error as e:
            logger.error("Failed to list pets: %s", e)
            raise StorageError(f"Failed to list pets: {e}") from e
        finally:
            conn.close()
        return [Pet.model_validate_json(row["value"]) for row in rows]

    def remove(self, pet_id: str) -> None:
        """Delete the record under ``pet_id``.  Missing ids are ignored."""
        self.remove_many([pet_id])

    def remove_many(self, pet_ids: Iterable[str]) -> None:
        """Delete several records in one transaction.

        Either every listed record is removed or, when the database
        rejects any of the deletes, none is.  Missing ids are ignored.
        """
        pet_ids = list(pet_ids)
        try:
            with get_cursor(self.database_url) as cursor:
                for pet_id in pet_ids:
                    cursor.execute("DELETE FROM pets WHERE id = ?", (pet_id,))
        except sqlite3.Error as e:
            logger.error("Failed to remove pets %s: %s", pet_ids, e)
            raise StorageError(f"Failed to remove pets: {e}") from e

    def size(self) -> int:
        """Number of stored records."""
        conn = get_connection(self.database_url)
        try:
            return conn.execute("SELECT COUNT(*) FROM pets").fetchone()[0]
        except sqlite3.Error as e:
            logger.error("Failed to count pets: %s", e)
            raise StorageError(f"Failed to count pets: {e}") from e
        finally:
            conn.close()

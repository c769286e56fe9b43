"""
Document Store on SQLite.
"""

from __future__ import annotations

__all__ = ["SQLite"]

import json
import os
import sqlite3
from threading import Lock
from typing import Any

from picset.core import Context, DataModel, NCall, Provider, Response
from picset.core.exceptions import NotFoundError, PreconditionFailedError

from .._helper import (
    check_identifier,
    generate_etag,
    get_collection_name,
    get_id,
    get_value,
)
from .._models import (
    DocumentItem,
    DocumentKey,
    DocumentKeyType,
    DocumentProperties,
)


class SQLite(Provider):
    database: str
    table: str | None
    nparams: dict[str, Any]

    _client: Any
    _lock: Lock
    _tables: set[str]

    def __init__(
        self,
        database: str = ":memory:",
        table: str | None = None,
        nparams: dict[str, Any] = dict(),
        **kwargs,
    ):
        """Initialize.

        Args:
            database:
                SQLite database, defaults to ":memory:".
            table:
                SQLite table name mapped to document store collection.
            nparams:
                Native parameters to sqlite client.
        """
        self.database = database
        self.table = table
        self.nparams = nparams

        self._client = None
        self._lock = Lock()
        self._tables = set()

    def __setup__(self, context: Context | None = None) -> None:
        if self._client is not None:
            return

        folder = os.path.dirname(self.database)
        if self.database != ":memory:" and folder:
            os.makedirs(folder, exist_ok=True)
        self._client = sqlite3.connect(
            self.database,
            check_same_thread=False,
            **self.nparams,
        )

    def _get_table(self, collection: str | None) -> str:
        table = check_identifier(
            get_collection_name(collection, self.table, self.__component__)
        )
        if table not in self._tables:
            self._client.execute(
                f"""CREATE TABLE IF NOT EXISTS {table}
                (id TEXT PRIMARY KEY, value JSON, etag TEXT)"""
            )
            self._client.commit()
            self._tables.add(table)
        return table

    def get(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[DocumentItem]:
        id = str(get_id(key))
        with self._lock:
            table = self._get_table(collection)
            row = self._client.execute(
                f"SELECT value, etag FROM {table} WHERE id = ?", (id,)
            ).fetchone()
        if row is None:
            raise NotFoundError(f"Document {id} not found")
        return Response(
            result=DocumentItem(
                key=DocumentKey(id=id),
                value=json.loads(row[0]),
                properties=DocumentProperties(etag=row[1]),
            )
        )

    def put(
        self,
        value: dict[str, Any] | DataModel,
        key: DocumentKeyType | dict | DocumentKey | None = None,
        exists: bool | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[DocumentItem]:
        document = get_value(value)
        id = str(get_id(key, document, self.__component__.id_map_field))
        etag = generate_etag()
        args = (id, json.dumps(document), etag)
        with self._lock:
            table = self._get_table(collection)
            if exists is False:
                query = f"""INSERT INTO {table} (id, value, etag)
                    VALUES (?, ?, ?)"""
                cursor = NCall(
                    self._client.execute,
                    [query, args],
                    None,
                    {sqlite3.IntegrityError: PreconditionFailedError},
                ).invoke()
            elif exists is True:
                query = f"UPDATE {table} SET value = ?, etag = ? WHERE id = ?"
                cursor = self._client.execute(query, (args[1], etag, id))
                if cursor.rowcount == 0:
                    self._client.rollback()
                    raise NotFoundError(f"Document {id} not found")
            else:
                query = f"""INSERT INTO {table} (id, value, etag)
                    VALUES (?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                    value = excluded.value, etag = excluded.etag"""
                cursor = self._client.execute(query, args)
            self._client.commit()
        return Response(
            result=DocumentItem(
                key=DocumentKey(id=id),
                properties=DocumentProperties(etag=etag),
            ),
            native=dict(result=cursor),
        )

    def delete(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        id = str(get_id(key))
        with self._lock:
            table = self._get_table(collection)
            cursor = self._client.execute(
                f"DELETE FROM {table} WHERE id = ?", (id,)
            )
            self._client.commit()
        if cursor.rowcount == 0:
            raise NotFoundError(f"Document {id} not found")
        return Response(result=None)

    def count(
        self,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[int]:
        with self._lock:
            table = self._get_table(collection)
            row = self._client.execute(
                f"SELECT COUNT(*) FROM {table}"
            ).fetchone()
        return Response(result=row[0])

    def close(self, **kwargs: Any) -> Response[None]:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._tables = set()
        return Response(result=None)

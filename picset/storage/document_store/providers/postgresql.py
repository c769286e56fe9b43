"""
Document Store on PostgreSQL.
"""

from __future__ import annotations

__all__ = ["PostgreSQL"]

from typing import Any

import psycopg
from psycopg.types.json import Jsonb

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


class PostgreSQL(Provider):
    connection_string: str
    table: str | None
    nparams: dict[str, Any]

    _client: Any
    _aclient: Any
    _tables: set[str]
    _atables: set[str]

    def __init__(
        self,
        connection_string: str,
        table: str | None = None,
        nparams: dict[str, Any] = dict(),
        **kwargs,
    ):
        """Initialize.

        Args:
            connection_string:
                PostgreSQL connection string.
            table:
                PostgreSQL table name mapped to document store collection.
            nparams:
                Native parameters to psycopg client.
        """
        self.connection_string = connection_string
        self.table = table
        self.nparams = nparams

        self._client = None
        self._aclient = None
        self._tables = set()
        self._atables = set()

    def __setup__(self, context: Context | None = None) -> None:
        if self._client is not None:
            return

        self._client = psycopg.connect(
            self.connection_string, autocommit=True, **self.nparams
        )

    async def __asetup__(self, context: Context | None = None) -> None:
        if self._aclient is not None:
            return
        self._aclient = await psycopg.AsyncConnection.connect(
            self.connection_string, autocommit=True, **self.nparams
        )

    def _get_table_name(self, collection: str | None) -> str:
        return check_identifier(
            get_collection_name(collection, self.table, self.__component__)
        )

    @staticmethod
    def _create_table_query(table: str) -> str:
        return f"""CREATE TABLE IF NOT EXISTS {table}
            (id TEXT PRIMARY KEY, value JSONB, etag TEXT)"""

    def _get_table(self, collection: str | None) -> str:
        table = self._get_table_name(collection)
        if table not in self._tables:
            self._client.execute(self._create_table_query(table))
            self._tables.add(table)
        return table

    async def _aget_table(self, collection: str | None) -> str:
        table = self._get_table_name(collection)
        if table not in self._atables:
            await self._aclient.execute(self._create_table_query(table))
            self._atables.add(table)
        return table

    @staticmethod
    def _convert_put(
        table: str,
        id: str,
        document: dict[str, Any],
        etag: str,
        exists: bool | None,
    ) -> tuple[str, tuple]:
        if exists is False:
            query = f"""INSERT INTO {table} (id, value, etag)
                VALUES (%s, %s, %s)"""
            return query, (id, Jsonb(document), etag)
        if exists is True:
            query = f"UPDATE {table} SET value = %s, etag = %s WHERE id = %s"
            return query, (Jsonb(document), etag, id)
        query = f"""INSERT INTO {table} (id, value, etag)
            VALUES (%s, %s, %s)
            ON CONFLICT (id) DO UPDATE SET
            value = EXCLUDED.value, etag = EXCLUDED.etag"""
        return query, (id, Jsonb(document), etag)

    @staticmethod
    def _convert_get_result(id: str, row: Any) -> DocumentItem:
        if row is None:
            raise NotFoundError(f"Document {id} not found")
        return DocumentItem(
            key=DocumentKey(id=id),
            value=row[0],
            properties=DocumentProperties(etag=row[1]),
        )

    def get(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[DocumentItem]:
        id = str(get_id(key))
        table = self._get_table(collection)
        row = self._client.execute(
            f"SELECT value, etag FROM {table} WHERE id = %s", (id,)
        ).fetchone()
        return Response(result=self._convert_get_result(id, row))

    async def aget(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[DocumentItem]:
        id = str(get_id(key))
        table = await self._aget_table(collection)
        cursor = await self._aclient.execute(
            f"SELECT value, etag FROM {table} WHERE id = %s", (id,)
        )
        row = await cursor.fetchone()
        return Response(result=self._convert_get_result(id, row))

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
        table = self._get_table(collection)
        query, args = self._convert_put(table, id, document, etag, exists)
        cursor = NCall(
            self._client.execute,
            [query, args],
            None,
            {psycopg.errors.UniqueViolation: PreconditionFailedError},
        ).invoke()
        if exists is True and cursor.rowcount == 0:
            raise NotFoundError(f"Document {id} not found")
        return Response(
            result=DocumentItem(
                key=DocumentKey(id=id),
                properties=DocumentProperties(etag=etag),
            )
        )

    async def aput(
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
        table = await self._aget_table(collection)
        query, args = self._convert_put(table, id, document, etag, exists)
        try:
            cursor = await self._aclient.execute(query, args)
        except psycopg.errors.UniqueViolation as e:
            raise PreconditionFailedError(str(e)) from e
        if exists is True and cursor.rowcount == 0:
            raise NotFoundError(f"Document {id} not found")
        return Response(
            result=DocumentItem(
                key=DocumentKey(id=id),
                properties=DocumentProperties(etag=etag),
            )
        )

    def delete(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        id = str(get_id(key))
        table = self._get_table(collection)
        cursor = self._client.execute(
            f"DELETE FROM {table} WHERE id = %s", (id,)
        )
        if cursor.rowcount == 0:
            raise NotFoundError(f"Document {id} not found")
        return Response(result=None)

    def count(
        self,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[int]:
        table = self._get_table(collection)
        row = self._client.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
        return Response(result=row[0])

    def close(self, **kwargs: Any) -> Response[None]:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._tables = set()
        return Response(result=None)

    async def aclose(self, **kwargs: Any) -> Response[None]:
        if self._aclient is not None:
            await self._aclient.close()
            self._aclient = None
            self._atables = set()
        return Response(result=None)

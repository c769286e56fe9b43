from __future__ import annotations

from typing import Any

from picset.core import Component, Response, operation

from ._models import ObjectItem, ObjectKey, ObjectList, ObjectProperties

DEFAULT_EXPIRY = 3600 * 1000


class ObjectStore(Component):
    collection: str | None

    def __init__(self, collection: str | None = None, **kwargs: Any):
        """Initialize.

        Args:
            collection:
                Collection name. Maps to a bucket, folder or
                namespace depending on the provider.
        """
        self.collection = collection
        super().__init__(**kwargs)

    @operation()
    def put(
        self,
        key: str | dict | ObjectKey,
        value: bytes,
        metadata: dict | None = None,
        properties: dict | ObjectProperties | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        """Put object.

        Args:
            key:
                Object key.
            value:
                Object value.
            metadata:
                Custom metadata.
            properties:
                Object properties, e.g. content type and
                cache control.
            collection:
                Collection name.

        Returns:
            Object item with the url of the object.
        """
        raise NotImplementedError

    @operation()
    def get(
        self,
        key: str | dict | ObjectKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        """Get object.

        Args:
            key:
                Object key.
            collection:
                Collection name.

        Returns:
            Object item.

        Raises:
            NotFoundError:
                Object not found.
        """
        raise NotImplementedError

    @operation()
    def delete(
        self,
        key: str | dict | ObjectKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        """Delete object.

        Args:
            key:
                Object key.
            collection:
                Collection name.

        Raises:
            NotFoundError:
                Object not found.
        """
        raise NotImplementedError

    @operation()
    def query(
        self,
        prefix: str | None = None,
        limit: int | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectList]:
        """List objects ordered by key.

        Args:
            prefix:
                Key prefix to filter on.
            limit:
                Maximum number of items.
            collection:
                Collection name.

        Returns:
            Object list without values.
        """
        raise NotImplementedError

    @operation()
    def generate(
        self,
        key: str | dict | ObjectKey,
        method: str = "GET",
        expiry: int = DEFAULT_EXPIRY,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        """Generate signed URL.

        Args:
            key:
                Object key.
            method:
                Operation method. One of "GET" or "PUT".
            expiry:
                Expiry in milliseconds.
            collection:
                Collection name.

        Returns:
            Object item with signed URL. Providers that serve
            objects without signing return the plain url.
        """
        raise NotImplementedError

    @operation()
    def close(
        self,
        **kwargs: Any,
    ) -> Response[None]:
        """Close the client.

        Returns:
            None.
        """
        raise NotImplementedError

    @operation()
    async def aput(
        self,
        key: str | dict | ObjectKey,
        value: bytes,
        metadata: dict | None = None,
        properties: dict | ObjectProperties | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        """Put object.

        Args:
            key:
                Object key.
            value:
                Object value.
            metadata:
                Custom metadata.
            properties:
                Object properties.
            collection:
                Collection name.

        Returns:
            Object item with the url of the object.
        """
        raise NotImplementedError

    @operation()
    async def aget(
        self,
        key: str | dict | ObjectKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        """Get object.

        Args:
            key:
                Object key.
            collection:
                Collection name.

        Returns:
            Object item.
        """
        raise NotImplementedError

    @operation()
    async def adelete(
        self,
        key: str | dict | ObjectKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        """Delete object.

        Args:
            key:
                Object key.
            collection:
                Collection name.
        """
        raise NotImplementedError

    @operation()
    async def aquery(
        self,
        prefix: str | None = None,
        limit: int | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectList]:
        """List objects ordered by key.

        Args:
            prefix:
                Key prefix to filter on.
            limit:
                Maximum number of items.
            collection:
                Collection name.

        Returns:
            Object list without values.
        """
        raise NotImplementedError

    @operation()
    async def agenerate(
        self,
        key: str | dict | ObjectKey,
        method: str = "GET",
        expiry: int = DEFAULT_EXPIRY,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        """Generate signed URL.

        Args:
            key:
                Object key.
            method:
                Operation method. One of "GET" or "PUT".
            expiry:
                Expiry in milliseconds.
            collection:
                Collection name.

        Returns:
            Object item with signed URL.
        """
        raise NotImplementedError

    @operation()
    async def aclose(
        self,
        **kwargs: Any,
    ) -> Response[None]:
        """Close the client.

        Returns:
            None.
        """
        raise NotImplementedError

"""
Document Store
"""

from typing import Any

from picset.core import Component, DataModel, Response, operation

from ._models import DocumentItem, DocumentKey, DocumentKeyType


class DocumentStore(Component):
    collection: str | None
    id_map_field: str | None

    def __init__(
        self,
        collection: str | None = None,
        id_map_field: str | None = "id",
        **kwargs,
    ):
        """Initialize.

        Args:
            collection:
                Default collection name.
            id_map_field:
                Field in the document to map into id
                when no key is given.
        """
        self.collection = collection
        self.id_map_field = id_map_field

        super().__init__(**kwargs)

    @operation()
    def get(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[DocumentItem]:
        """Get document.

        Args:
            key:
                Document key.
            collection:
                Collection name.

        Returns:
            Document item.

        Raises:
            NotFoundError:
                Document not found.
        """
        raise NotImplementedError

    @operation()
    def put(
        self,
        value: dict[str, Any] | DataModel,
        key: DocumentKeyType | dict | DocumentKey | None = None,
        exists: bool | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[DocumentItem]:
        """Put document.

        Args:
            value:
                Document.
            key:
                Document key. Taken from the id map field
                of the document when not given.
            exists:
                False to only create, True to only replace,
                None to upsert.
            collection:
                Collection name.

        Returns:
            Document item.

        Raises:
            PreconditionFailedError:
                Document exists and exists is False.
            NotFoundError:
                Document missing and exists is True.
        """
        raise NotImplementedError

    @operation()
    def delete(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        """Delete document.

        Args:
            key:
                Document key.
            collection:
                Collection name.

        Raises:
            NotFoundError:
                Document not found.
        """
        raise NotImplementedError

    @operation()
    def count(
        self,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[int]:
        """Count documents.

        Args:
            collection:
                Collection name.

        Returns:
            Count of documents.
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
    async def aget(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[DocumentItem]:
        """Get document.

        Args:
            key:
                Document key.
            collection:
                Collection name.

        Returns:
            Document item.

        Raises:
            NotFoundError:
                Document not found.
        """
        raise NotImplementedError

    @operation()
    async def aput(
        self,
        value: dict[str, Any] | DataModel,
        key: DocumentKeyType | dict | DocumentKey | None = None,
        exists: bool | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[DocumentItem]:
        """Put document.

        Args:
            value:
                Document.
            key:
                Document key.
            exists:
                False to only create, True to only replace,
                None to upsert.
            collection:
                Collection name.

        Returns:
            Document item.
        """
        raise NotImplementedError

    @operation()
    async def adelete(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        """Delete document.

        Args:
            key:
                Document key.
            collection:
                Collection name.
        """
        raise NotImplementedError

    @operation()
    async def acount(
        self,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[int]:
        """Count documents.

        Args:
            collection:
                Collection name.

        Returns:
            Count of documents.
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

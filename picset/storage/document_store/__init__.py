from picset.core.exceptions import (
    BadRequestError,
    NotFoundError,
    PreconditionFailedError,
)

from ._models import DocumentItem, DocumentKey, DocumentProperties
from .component import DocumentStore

__all__ = [
    "DocumentItem",
    "DocumentKey",
    "DocumentProperties",
    "DocumentStore",
    "BadRequestError",
    "NotFoundError",
    "PreconditionFailedError",
]

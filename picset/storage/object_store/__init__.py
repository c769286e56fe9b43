from picset.core.exceptions import (
    BadRequestError,
    NotFoundError,
    PreconditionFailedError,
)

from ._models import ObjectItem, ObjectKey, ObjectList, ObjectProperties
from .component import ObjectStore

__all__ = [
    "ObjectItem",
    "ObjectKey",
    "ObjectList",
    "ObjectProperties",
    "ObjectStore",
    "BadRequestError",
    "NotFoundError",
    "PreconditionFailedError",
]

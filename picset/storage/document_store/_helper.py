import re
import uuid
from typing import Any

from picset.core import DataModel
from picset.core.exceptions import BadRequestError

from ._models import DocumentKey, DocumentKeyType

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def get_value(value: dict[str, Any] | DataModel) -> dict[str, Any]:
    if isinstance(value, DataModel):
        return value.to_dict(by_alias=True)
    if isinstance(value, dict):
        return value
    raise BadRequestError("Document must be a dict or a data model")


def get_id(
    key: DocumentKeyType | dict | DocumentKey | None,
    value: dict[str, Any] | None = None,
    id_map_field: str | None = "id",
) -> DocumentKeyType:
    if key is None:
        if value is None or id_map_field is None or id_map_field not in value:
            raise BadRequestError("Document id not found in key or value")
        return value[id_map_field]
    if isinstance(key, (str, int)):
        return key
    if isinstance(key, dict):
        return DocumentKey.from_dict(key).id
    if isinstance(key, DocumentKey):
        return key.id
    raise BadRequestError("Key format error")


def get_collection_name(
    collection: str | None,
    default: str | None,
    component: object,
) -> str:
    name = collection or default or getattr(component, "collection", None)
    if name is None:
        raise BadRequestError("Collection name must be specified")
    return name


def generate_etag() -> str:
    return str(uuid.uuid4())


def check_identifier(name: str) -> str:
    if not IDENTIFIER.match(name):
        raise BadRequestError(f"Invalid collection name {name}")
    return name

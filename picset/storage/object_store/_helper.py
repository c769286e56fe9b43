from urllib.parse import quote

from picset.core.exceptions import BadRequestError

from ._models import ObjectKey, ObjectProperties


def get_id(key: str | dict | ObjectKey) -> str:
    if isinstance(key, str):
        id = key
    elif isinstance(key, dict):
        id = ObjectKey.from_dict(key).id
    elif isinstance(key, ObjectKey):
        id = key.id
    else:
        raise BadRequestError("Key format error")
    if not id:
        raise BadRequestError("Key must not be empty")
    return id


def get_properties(
    properties: dict | ObjectProperties | None,
) -> ObjectProperties:
    if properties is None:
        return ObjectProperties()
    if isinstance(properties, dict):
        return ObjectProperties.from_dict(properties)
    if isinstance(properties, ObjectProperties):
        return properties
    raise BadRequestError("Properties format error")


def get_collection_name(
    collection: str | None,
    default: str | None,
    component: object,
) -> str:
    name = collection or default or getattr(component, "collection", None)
    if name is None:
        raise BadRequestError("Collection name must be specified")
    return name


def build_url(base_url: str, id: str) -> str:
    return f"{base_url.rstrip('/')}/{quote(id)}"


def get_method(method: str | None) -> str:
    method = (method or "GET").upper()
    if method not in ("GET", "PUT"):
        raise BadRequestError(f"Method {method} not supported for signing")
    return method

"""
Static variant catalog.

Variant names are persisted as keys of every stored variant map.
Entries may be appended, never renamed or reordered. Any change
to the catalog bumps CATALOG_VERSION.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import ConfigDict

from picset.core import DataModel

CATALOG_VERSION = 1


class VariantSpec(DataModel):
    """Named target width of the catalog."""

    model_config = ConfigDict(frozen=True)

    name: str
    width: int


DEFAULT_CATALOG: tuple[VariantSpec, ...] = (
    VariantSpec(name="tiny", width=300),
    VariantSpec(name="thumb", width=600),
    VariantSpec(name="card", width=1200),
    VariantSpec(name="hero", width=2000),
)

ORIGINAL_VARIANT = "original"
ORIGINAL_KEY_NAME = "orig"
ORIGINAL_WIDTH_CAP = 2400

ALLOWED_MEDIA_TYPES: frozenset[str] = frozenset(
    [
        "image/jpeg",
        "image/png",
        "image/webp",
        "image/avif",
        "image/heic",
        "image/heif",
    ]
)

ENCODE_QUALITY = 82
CACHE_CONTROL = "public, max-age=31536000, immutable"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def validate_catalog(
    catalog: Iterable[VariantSpec],
    original_width: int = ORIGINAL_WIDTH_CAP,
) -> None:
    names: set[str] = set()
    for spec in catalog:
        if spec.name in names:
            raise ValueError(f"Duplicate variant name {spec.name}")
        if spec.name == ORIGINAL_VARIANT:
            raise ValueError(f"Variant name {spec.name} is reserved")
        if spec.width <= 0:
            raise ValueError(f"Variant {spec.name} width must be positive")
        if spec.width > original_width:
            raise ValueError(
                f"Variant {spec.name} width {spec.width} "
                f"exceeds the original cap {original_width}"
            )
        names.add(spec.name)
    if not names:
        raise ValueError("Catalog must not be empty")


def key_name(variant: str) -> str:
    if variant == ORIGINAL_VARIANT:
        return ORIGINAL_KEY_NAME
    return variant

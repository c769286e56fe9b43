from picset.core.exceptions import NotFoundError

from ._catalog import (
    ALLOWED_MEDIA_TYPES,
    CACHE_CONTROL,
    CATALOG_VERSION,
    DEFAULT_CATALOG,
    ENCODE_QUALITY,
    MAX_UPLOAD_BYTES,
    ORIGINAL_KEY_NAME,
    ORIGINAL_VARIANT,
    ORIGINAL_WIDTH_CAP,
    VariantSpec,
    validate_catalog,
)
from ._models import (
    DerivedEncoding,
    ImageRecord,
    IngestResult,
    RawUpload,
    StoredVariant,
    VariantMap,
    WorkingBuffer,
)
from .assembler import MetadataAssembler
from .component import ImagePipeline
from .config import PipelineConfig
from .deriver import VariantDeriver
from .exceptions import (
    DecodeFailure,
    DerivationFailure,
    InputValidationFailure,
    MetadataPersistFailure,
    PipelineError,
    StorageWriteFailure,
)
from .normalizer import Normalizer
from .uploader import StorageUploader

__all__ = [
    "ALLOWED_MEDIA_TYPES",
    "CACHE_CONTROL",
    "CATALOG_VERSION",
    "DEFAULT_CATALOG",
    "ENCODE_QUALITY",
    "MAX_UPLOAD_BYTES",
    "ORIGINAL_KEY_NAME",
    "ORIGINAL_VARIANT",
    "ORIGINAL_WIDTH_CAP",
    "DecodeFailure",
    "DerivationFailure",
    "DerivedEncoding",
    "ImagePipeline",
    "ImageRecord",
    "IngestResult",
    "InputValidationFailure",
    "MetadataAssembler",
    "MetadataPersistFailure",
    "Normalizer",
    "NotFoundError",
    "PipelineConfig",
    "PipelineError",
    "RawUpload",
    "StorageUploader",
    "StorageWriteFailure",
    "StoredVariant",
    "VariantDeriver",
    "VariantMap",
    "VariantSpec",
    "WorkingBuffer",
    "validate_catalog",
]

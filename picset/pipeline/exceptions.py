__all__ = [
    "PipelineError",
    "InputValidationFailure",
    "DecodeFailure",
    "DerivationFailure",
    "StorageWriteFailure",
    "MetadataPersistFailure",
]

from picset.core.exceptions import BaseError


class PipelineError(BaseError):
    """Failure of one ingest invocation.

    Nothing is persisted as metadata when an ingest fails.
    Objects already written stay in the object store and
    are listed in orphaned_keys.
    """

    status_code = 500
    orphaned_keys: list[str]

    def __init__(self, message: str, orphaned_keys: list[str] | None = None):
        super().__init__(message)
        self.orphaned_keys = list(orphaned_keys or [])


class InputValidationFailure(PipelineError):
    status_code = 400


class DecodeFailure(PipelineError):
    status_code = 422


class DerivationFailure(PipelineError):
    status_code = 500


class StorageWriteFailure(PipelineError):
    status_code = 502


class MetadataPersistFailure(PipelineError):
    status_code = 502

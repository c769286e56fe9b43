__all__ = [
    "BaseError",
    "BadRequestError",
    "ConflictError",
    "InternalError",
    "LoadError",
    "NotFoundError",
    "NotSupportedError",
    "PreconditionFailedError",
    "UnprocessableError",
]


class BaseError(Exception):
    status_code: int


class BadRequestError(BaseError):
    status_code = 400


class NotFoundError(BaseError):
    status_code = 404


class ConflictError(BaseError):
    status_code = 409


class PreconditionFailedError(BaseError):
    status_code = 412


class NotSupportedError(BaseError):
    status_code = 415


class UnprocessableError(BaseError):
    status_code = 422


class InternalError(Exception):
    status_code = 500


class LoadError(Exception):
    status_code = 500

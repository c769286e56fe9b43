from ._component import Component
from ._context import Context
from ._decorators import operation
from ._loader import Loader
from ._log_helper import configure_logging, get_logger, warn
from ._ncall import NCall
from ._operation import Operation
from ._provider import Provider
from ._response import Response
from .data_model import DataModel, DataModelField

__all__ = [
    "Component",
    "Context",
    "DataModel",
    "DataModelField",
    "Loader",
    "NCall",
    "Operation",
    "Provider",
    "Response",
    "configure_logging",
    "get_logger",
    "operation",
    "warn",
]

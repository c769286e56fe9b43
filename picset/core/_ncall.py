from __future__ import annotations

from typing import Any, Callable


class NCall:
    """Native client call with an optional error map.

    The error map translates native exception types into
    picset errors. Mapping a type to None swallows it and
    returns None.
    """

    function: Callable
    args: dict[str, Any] | list[Any] | None
    nargs: dict[str, Any] | None
    error_map: dict[Any, Any] | None

    def __init__(
        self,
        function: Callable,
        args: dict[str, Any] | list | None = None,
        nargs: dict[str, Any] | None = None,
        error_map: dict[Any, Any] | None = None,
    ):
        self.function = function
        self.args = args
        self.nargs = nargs
        self.error_map = error_map

    def __repr__(self) -> str:
        return str(self.function)

    def invoke(self) -> Any:
        args = self.args if self.args is not None else dict()
        nargs = self.nargs if self.nargs is not None else dict()
        try:
            if isinstance(args, list):
                return self.function(*args, **nargs)
            return self.function(**(args | nargs))
        except Exception as e:
            if self.error_map is not None:
                for error_type, mapped in self.error_map.items():
                    if isinstance(e, error_type):
                        if mapped is None:
                            return None
                        raise mapped(str(e)) from e
            raise

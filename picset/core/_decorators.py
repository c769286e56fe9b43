import inspect
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from ._operation import Operation
from .exceptions import NotSupportedError

T = TypeVar("T", bound=Callable[..., Any])


def operation(**config: Any) -> Callable[[T], T]:
    """Mark a component method as an operation.

    When the component has a bound provider, the call is
    dispatched to the provider method of the same name. Async
    operations drop their leading "a" before dispatch. If the
    provider does not support the operation, or the component
    has no provider, the component method body runs instead.
    """

    def decorator(func: T) -> T:
        setattr(func, "__operation__", True)
        setattr(func, "__config__", config)
        sig = inspect.signature(func)

        def _normalize(name: str, args: tuple, kwargs: dict) -> Operation:
            bound_args = sig.bind(*args, **kwargs)
            bound_args.apply_defaults()
            return Operation.normalize(
                name=name,
                args=dict(bound_args.arguments),
            )

        if not inspect.iscoroutinefunction(func):

            @wraps(func)
            def wrapper(*args, **kwargs) -> Any:
                self = args[0]
                context = kwargs.pop("__context__", None)
                if hasattr(self, "__provider__"):
                    operation = _normalize(func.__name__, args, kwargs)
                    try:
                        return self.__run__(operation, context)
                    except NotSupportedError:
                        return func(*args, **kwargs)
                return func(*args, **kwargs)

            return cast(T, wrapper)

        @wraps(func)
        async def awrapper(*args, **kwargs) -> Any:
            self = args[0]
            context = kwargs.pop("__context__", None)
            if hasattr(self, "__provider__"):
                operation = _normalize(func.__name__[1:], args, kwargs)
                try:
                    return await self.__arun__(operation, context)
                except NotSupportedError:
                    return await func(*args, **kwargs)
            return await func(*args, **kwargs)

        return cast(T, awrapper)

    return decorator

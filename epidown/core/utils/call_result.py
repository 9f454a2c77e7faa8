"""
Call result module.

Wraps a single collaborator call into a success-or-error value so that loops
over indexers and releases can inspect and discard failures explicitly
instead of letting exceptions cross iterations.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class CallResult(Generic[T]):
    """
    Outcome of one collaborator call.

    Exactly one of ``value`` / ``error`` is meaningful: a call that raised
    has ``error`` set, a call that returned (even ``None``) has ``ok``.

    Attributes:
        value: Return value of the call.
        error: Exception raised by the call, if any.
    """
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        """Check if the call returned normally."""
        return self.error is None

    @property
    def failed(self) -> bool:
        """Check if the call raised."""
        return self.error is not None

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` if the call failed."""
        if self.error is not None:
            return default
        return self.value

    @classmethod
    def success(cls, value: T) -> 'CallResult[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> 'CallResult[T]':
        return cls(error=error)


def attempt(func: Callable[..., T], *args: Any, **kwargs: Any) -> CallResult[T]:
    """
    Call ``func`` and capture its return value or the ``Exception`` it raised.

    ``BaseException`` subclasses that are not ``Exception`` (KeyboardInterrupt,
    SystemExit) still propagate.

    Args:
        func: Callable to invoke.
        *args: Positional arguments for the call.
        **kwargs: Keyword arguments for the call.

    Returns:
        CallResult holding either the value or the error.
    """
    try:
        return CallResult.success(func(*args, **kwargs))
    except Exception as e:
        return CallResult.failure(e)

from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class Lazy(Generic[T]):
    """A deferred value, computed on first access and memoized
    afterwards.

    >>> calls = []
    >>> value = Lazy(lambda: calls.append(1) or len(calls))
    >>> value.get(), value.get()
    (1, 1)
    """

    def __init__(self, compute: Callable[[], T]) -> None:
        self._compute = compute
        self._computed = False
        self._value = None

    def get(self) -> T:
        if not self._computed:
            self._value = self._compute()
            self._computed = True
        return self._value  # type: ignore

    def is_computed(self) -> bool:
        return self._computed

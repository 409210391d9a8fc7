"""A value tagged with the range of source text it came from."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Callable, Generic, TypeVar

from ppcodemap.source import Span

T = TypeVar("T")
U = TypeVar("U")


@total_ordering
@dataclass(frozen=True, eq=False)
class Located(Generic[T]):
    """A value plus its location.

    Comparison, hashing and ``str`` look at the value only; two values read
    from different places compare equal when the values do.
    """

    inner: T
    loc: Span = Span(0, 0)

    def value(self) -> T:
        return self.inner

    def range(self) -> Span:
        return self.loc

    def map(self, transform: Callable[[T], U]) -> Located[U]:
        return Located(transform(self.inner), self.loc)

    def and_then(self, transform: Callable[[Any], Any]) -> Located[Any]:
        """Apply ``transform`` unless the value is ``None``."""
        if self.inner is None:
            return self
        return Located(transform(self.inner), self.loc)

    def transpose(self) -> Located[Any] | None:
        """``None`` for a located ``None``, else ``self``."""
        if self.inner is None:
            return None
        return self

    def _unwrap(self, other: object) -> object:
        return other.inner if isinstance(other, Located) else other

    def __eq__(self, other: object) -> bool:
        return self.inner == self._unwrap(other)

    def __lt__(self, other: object) -> bool:
        return self.inner < self._unwrap(other)  # type: ignore[operator]

    def __hash__(self) -> int:
        return hash(self.inner)

    def __str__(self) -> str:
        return str(self.inner)

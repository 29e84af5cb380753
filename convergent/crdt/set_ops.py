"""Set-algebra helpers shared by the OR-Set merge and membership logic."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable

T = TypeVar("T")


def union(dest: set[T], source: Iterable[T]) -> set[T]:
    """Insert every element of ``source`` into ``dest``.

    Mutates ``dest`` in place and returns it, so calls can be chained.

    Args:
        dest: Set that receives the new elements.
        source: Elements to add.

    Returns:
        ``dest`` itself.
    """
    for element in source:
        if element not in dest:
            dest.add(element)
    return dest


def difference(dest: Iterable[T], source: set[T] | frozenset[T]) -> list[T]:
    """Elements of ``dest`` that are not in ``source``.

    Neither input is mutated. The result keeps ``dest``'s iteration order.

    Args:
        dest: Elements to filter.
        source: Elements to exclude.

    Returns:
        A new list.
    """
    return [element for element in dest if element not in source]
